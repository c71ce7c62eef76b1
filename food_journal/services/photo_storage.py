"""Object storage for review photos."""

import asyncio
import time
from pathlib import Path
from typing import Optional
from uuid import UUID

from loguru import logger

from food_journal.core.config import settings


def photo_object_key(user_id: UUID, filename: Optional[str]) -> str:
    """Storage key ``reviews/<user>/<millis>.<ext>`` for an uploaded photo."""
    ext = "jpg"
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower() or ext
    return f"reviews/{user_id}/{int(time.time() * 1000)}.{ext}"


class PhotoStorage:
    """Upload interface; returns the public URL of the stored object."""

    async def upload(self, key: str, data: bytes) -> str:
        raise NotImplementedError


class LocalPhotoStorage(PhotoStorage):
    """Stores photos on local disk and serves them from PHOTO_PUBLIC_BASE_URL."""

    def __init__(self, root: Optional[str] = None, public_base_url: Optional[str] = None):
        self.root = Path(root or settings.PHOTO_STORAGE_DIR)
        self.public_base_url = (public_base_url or settings.PHOTO_PUBLIC_BASE_URL).rstrip("/")

    async def upload(self, key: str, data: bytes) -> str:
        path = self.root / key
        await asyncio.to_thread(self._write, path, data)
        logger.info(f"Stored photo {key} ({len(data)} bytes)")
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
