"""Local filesystem storage for uploaded photo binaries."""

import logging
from dataclasses import dataclass
from pathlib import Path

from photo_gallery.domain.photos import StorageError
from photo_gallery.services.photos import PhotoFileStorage

logger = logging.getLogger(__name__)


@dataclass
class LocalPhotoStorage(PhotoFileStorage):
    """Writes photos under ``photo_dir`` and maps them to root-relative URLs."""

    root_dir: Path
    photo_dir: Path

    def ensure_directory(self) -> None:
        """Create the photo directory if it does not exist."""
        try:
            self.photo_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("Failed to create photo directory") from exc

    def exists(self, filename: str) -> bool:
        """Return true when a stored file with this name exists."""
        return (self.photo_dir / filename).exists()

    def write(self, filename: str, content: bytes) -> Path:
        """Write bytes under the given name and return the stored path."""
        path = self.photo_dir / filename
        path.write_bytes(content)
        return path

    def url_for(self, path: Path) -> str:
        """Return ``/`` plus the path relative to the root, with forward slashes."""
        relative = path.resolve().relative_to(self.root_dir.resolve())
        return "/" + relative.as_posix()

    def path_for(self, url: str) -> Path:
        """Return the filesystem path a public URL points at."""
        return self.root_dir / url.lstrip("/")

    def remove(self, path: Path) -> None:
        """Remove a stored file, raising on failure."""
        path.unlink()

    def delete_url(self, url: str) -> bool:
        """Best-effort removal of the file behind a public URL.

        Never raises; returns whether a file was removed.
        """
        path = self.path_for(url).resolve()
        if not path.is_relative_to(self.photo_dir.resolve()):
            logger.warning("Refusing to delete file outside photo directory: %s", url)
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.info("Photo file already absent: %s", url)
            return False
        except OSError:
            logger.warning("Failed to delete photo file %s", url, exc_info=True)
            return False
        return True
