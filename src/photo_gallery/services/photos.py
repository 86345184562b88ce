"""Upload, deletion and listing logic for the photo gallery."""

import asyncio
import logging
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol

from photo_gallery.domain.photos import (
    NotFoundError,
    PhotoRecordSet,
    StorageError,
    UnsupportedMediaError,
    UploadedFile,
    UploadResult,
    ValidationError,
)

logger = logging.getLogger(__name__)

IMAGE_ONLY_MESSAGE = "Only image uploads are allowed"
PHOTO_URL_REQUIRED_MESSAGE = "Photo URL is required"
NO_PHOTOS_MESSAGE = "No photos found"
PHOTO_NOT_FOUND_MESSAGE = "Photo not found"

DEFAULT_EXTENSION = ".jpg"
RANDOM_UPPER_BOUND = 1_000_000_000
_MAX_NAME_ATTEMPTS = 8
_EXTENSION_PATTERN = re.compile(r"^\.[A-Za-z0-9]+$")


class PhotoRecordStore(Protocol):
    """Persistence interface for the photo URL list."""

    lock: asyncio.Lock

    def load(self) -> PhotoRecordSet:
        """Return the stored record set, or an empty one if unreadable."""

    def save(self, record_set: PhotoRecordSet) -> None:
        """Overwrite the stored record set."""


class PhotoFileStorage(Protocol):
    """Interface for the directory holding uploaded binaries."""

    def ensure_directory(self) -> None:
        """Create the photo directory if it does not exist."""

    def exists(self, filename: str) -> bool:
        """Return true when a stored file with this name exists."""

    def write(self, filename: str, content: bytes) -> Path:
        """Write bytes under the given name and return the stored path."""

    def url_for(self, path: Path) -> str:
        """Return the public URL for a stored path."""

    def remove(self, path: Path) -> None:
        """Remove a stored file, raising on failure."""

    def delete_url(self, url: str) -> bool:
        """Best-effort removal of the file behind a public URL."""


def is_image_content_type(content_type: str | None) -> bool:
    """Return true for declared MIME types in the ``image/`` family."""
    return bool(content_type) and content_type.strip().lower().startswith("image/")


def derive_extension(original_filename: str | None) -> str:
    """Return the original file's extension, or ``.jpg`` when it has none."""
    if not original_filename:
        return DEFAULT_EXTENSION
    basename = original_filename.replace("\\", "/").rsplit("/", 1)[-1]
    suffix = PurePosixPath(basename).suffix
    if not _EXTENSION_PATTERN.match(suffix):
        return DEFAULT_EXTENSION
    return suffix


def generate_filename(
    original_filename: str | None,
    *,
    now_ms: int | None = None,
    token: int | None = None,
) -> str:
    """Build a ``<millis>-<random><ext>`` storage name."""
    millis = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    suffix = token if token is not None else secrets.randbelow(RANDOM_UPPER_BOUND)
    return f"{millis}-{suffix}{derive_extension(original_filename)}"


@dataclass
class PhotoService:
    """Application service for the gallery's record set and files."""

    record_store: PhotoRecordStore
    file_storage: PhotoFileStorage
    max_files_per_upload: int = 20

    def list_photos(self) -> list[str]:
        """Return the stored photo URLs in order."""
        return list(self.record_store.load().photos)

    async def upload_photos(self, files: list[UploadedFile]) -> UploadResult:
        """Store a batch of images and append their URLs to the record set.

        The whole batch is rejected before anything touches the disk when
        any part is not an image.
        """
        if len(files) > self.max_files_per_upload:
            raise ValidationError(
                f"Too many files; at most {self.max_files_per_upload} per upload"
            )
        for upload in files:
            if not is_image_content_type(upload.content_type):
                raise UnsupportedMediaError(IMAGE_ONLY_MESSAGE)

        async with self.record_store.lock:
            written = await asyncio.to_thread(self._write_files, files)
            record_set = await asyncio.to_thread(self.record_store.load)
            urls = [self.file_storage.url_for(path) for path in written]
            record_set.photos.extend(urls)
            try:
                await asyncio.to_thread(self.record_store.save, record_set)
            except StorageError:
                self._discard(written)
                raise

        if urls:
            logger.info("Stored %d uploaded photo(s)", len(urls))
        return UploadResult(photos=list(record_set.photos), uploaded=urls)

    async def delete_photo(self, photo_url: str | None) -> list[str]:
        """Remove a URL from the record set and clean up its file."""
        if not photo_url:
            raise ValidationError(PHOTO_URL_REQUIRED_MESSAGE)

        async with self.record_store.lock:
            record_set = await asyncio.to_thread(self.record_store.load)
            if record_set.photos_missing:
                raise ValidationError(NO_PHOTOS_MESSAGE)
            try:
                index = record_set.photos.index(photo_url)
            except ValueError:
                raise NotFoundError(PHOTO_NOT_FOUND_MESSAGE) from None
            del record_set.photos[index]
            await asyncio.to_thread(self.record_store.save, record_set)

        await asyncio.to_thread(self.file_storage.delete_url, photo_url)
        return list(record_set.photos)

    def _write_files(self, files: list[UploadedFile]) -> list[Path]:
        self.file_storage.ensure_directory()
        written: list[Path] = []
        for upload in files:
            filename = self._assign_filename(upload.original_filename)
            try:
                path = self.file_storage.write(filename, upload.content)
            except OSError as exc:
                self._discard(written)
                raise StorageError("Failed to store uploaded photo") from exc
            upload.stored_name = filename
            upload.stored_path = path
            written.append(path)
        return written

    def _assign_filename(self, original_filename: str | None) -> str:
        for _ in range(_MAX_NAME_ATTEMPTS):
            filename = generate_filename(original_filename)
            if not self.file_storage.exists(filename):
                return filename
        raise StorageError("Could not allocate a unique photo filename")

    def _discard(self, paths: list[Path]) -> None:
        for path in paths:
            try:
                self.file_storage.remove(path)
            except OSError:
                logger.warning("Failed to remove partial upload %s", path)
