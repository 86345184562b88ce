"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from photo_gallery.api.app import create_app
from photo_gallery.config import Settings
from photo_gallery.containers import AppContainer, build_container
from photo_gallery.domain.photos import PhotoRecordSet, StorageError
from photo_gallery.services.photos import (
    PhotoFileStorage,
    PhotoRecordStore,
    PhotoService,
)

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"fake-png-body"


@dataclass
class InMemoryPhotoRecordStore(PhotoRecordStore):
    """In-memory record store for tests."""

    photos: list[str] = field(default_factory=list)
    saves: int = 0
    fail_on_save: bool = False
    photos_missing: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def load(self) -> PhotoRecordSet:
        return PhotoRecordSet(
            photos=list(self.photos), photos_missing=self.photos_missing
        )

    def save(self, record_set: PhotoRecordSet) -> None:
        if self.fail_on_save:
            raise StorageError("disk full")
        self.photos = list(record_set.photos)
        self.saves += 1


@dataclass
class FakePhotoFileStorage(PhotoFileStorage):
    """Photo storage that keeps file contents in a dict keyed by name."""

    files: dict[str, bytes] = field(default_factory=dict)
    fail_after: int | None = None
    deleted_urls: list[str] = field(default_factory=list)
    ensured: int = 0

    def ensure_directory(self) -> None:
        self.ensured += 1

    def exists(self, filename: str) -> bool:
        return filename in self.files

    def write(self, filename: str, content: bytes) -> Path:
        if self.fail_after is not None and len(self.files) >= self.fail_after:
            raise OSError("No space left on device")
        self.files[filename] = content
        return Path("uploads/photos") / filename

    def url_for(self, path: Path) -> str:
        return "/" + path.as_posix()

    def remove(self, path: Path) -> None:
        self.files.pop(path.name)

    def delete_url(self, url: str) -> bool:
        self.deleted_urls.append(url)
        return self.files.pop(url.rsplit("/", 1)[-1], None) is not None


@pytest.fixture
def record_store() -> InMemoryPhotoRecordStore:
    return InMemoryPhotoRecordStore()


@pytest.fixture
def file_storage() -> FakePhotoFileStorage:
    return FakePhotoFileStorage()


@pytest.fixture
def photo_service(
    record_store: InMemoryPhotoRecordStore, file_storage: FakePhotoFileStorage
) -> PhotoService:
    return PhotoService(record_store=record_store, file_storage=file_storage)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(_env_file=None, root_dir=tmp_path)


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))
