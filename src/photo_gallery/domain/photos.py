"""Domain models and errors for the photo gallery."""

from dataclasses import dataclass, field
from pathlib import Path


class PhotoGalleryError(Exception):
    """Base class for errors raised by the gallery services."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PhotoGalleryError):
    """Raised when request input is missing or invalid."""


class UnsupportedMediaError(ValidationError):
    """Raised when an uploaded part is not an image."""


class NotFoundError(PhotoGalleryError):
    """Raised when a referenced photo is not in the record set."""


class StorageError(PhotoGalleryError, OSError):
    """Raised when the filesystem cannot persist gallery state."""


@dataclass
class PhotoRecordSet:
    """The persisted, ordered list of photo URLs.

    ``extra`` carries any other top-level keys of the backing document so
    that they survive a save. ``photos_missing`` is set when the document
    was readable but held no ``photos`` list.
    """

    photos: list[str] = field(default_factory=list)
    extra: dict[str, object] = field(default_factory=dict)
    photos_missing: bool = False

    def to_document(self) -> dict[str, object]:
        """Return the JSON document written by the record store."""
        return {**self.extra, "photos": list(self.photos)}


@dataclass
class UploadedFile:
    """One file part of a multipart upload."""

    original_filename: str | None
    content_type: str | None
    content: bytes
    stored_name: str | None = None
    stored_path: Path | None = None


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an upload batch."""

    photos: list[str]
    uploaded: list[str]
