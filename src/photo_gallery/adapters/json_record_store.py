"""JSON file-backed photo record store."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from photo_gallery.domain.photos import PhotoRecordSet, StorageError
from photo_gallery.services.photos import PhotoRecordStore

logger = logging.getLogger(__name__)


@dataclass
class JsonPhotoRecordStore(PhotoRecordStore):
    """Keeps the photo URL list in a single JSON document.

    Reads fail open to an empty record set. Writes replace the whole file.
    Callers hold ``lock`` around a load/mutate/save cycle.
    """

    path: Path
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def load(self) -> PhotoRecordSet:
        """Return the stored record set, or an empty one if unreadable."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return PhotoRecordSet()
        except OSError:
            logger.warning("Failed to read photo records from %s", self.path)
            return PhotoRecordSet()

        # Undecodable bytes surface as UnicodeDecodeError, a ValueError.
        try:
            document = json.loads(raw)
        except ValueError:
            logger.warning(
                "Photo records in %s are not valid JSON; treating as empty",
                self.path,
            )
            return PhotoRecordSet()
        if not isinstance(document, dict):
            return PhotoRecordSet(photos_missing=True)

        extra = {key: value for key, value in document.items() if key != "photos"}
        photos = document.get("photos")
        if not isinstance(photos, list):
            return PhotoRecordSet(extra=extra, photos_missing=True)
        return PhotoRecordSet(
            photos=[url for url in photos if isinstance(url, str) and url],
            extra=extra,
        )

    def save(self, record_set: PhotoRecordSet) -> None:
        """Serialize the record set as indented JSON, replacing the file."""
        payload = json.dumps(record_set.to_document(), indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise StorageError("Failed to save photo records") from exc
