"""Dependency container wiring for the application."""

from dataclasses import dataclass

from photo_gallery.adapters.json_record_store import JsonPhotoRecordStore
from photo_gallery.adapters.local_photo_storage import LocalPhotoStorage
from photo_gallery.config import Settings
from photo_gallery.services.photos import PhotoService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photo_service: PhotoService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Creates the data and photo directories so a fresh checkout can serve
    requests straight away.
    """
    resolved_settings = settings or Settings()
    resolved_settings.data_dir.mkdir(parents=True, exist_ok=True)
    resolved_settings.photo_dir.mkdir(parents=True, exist_ok=True)

    record_store = JsonPhotoRecordStore(resolved_settings.db_file)
    file_storage = LocalPhotoStorage(
        root_dir=resolved_settings.root_dir,
        photo_dir=resolved_settings.photo_dir,
    )
    photo_service = PhotoService(
        record_store=record_store,
        file_storage=file_storage,
        max_files_per_upload=resolved_settings.max_files_per_upload,
    )
    return AppContainer(settings=resolved_settings, photo_service=photo_service)
