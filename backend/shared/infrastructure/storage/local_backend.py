"""Filesystem-based image storage."""

from __future__ import annotations

from pathlib import Path

from shared.config.logging import get_logger
from . import ImageStorageError, StoredImage, generate_key

logger = get_logger(__name__)


class LocalImageStorage:
    """Save images under ``MEDIA_DIR`` and serve them from ``MEDIA_URL_PREFIX``."""

    def __init__(self, base_dir: str | Path, url_prefix: str = "/uploads") -> None:
        self.base_dir = Path(base_dir).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if not path.is_relative_to(self.base_dir):
            raise ImageStorageError(f"Key escapes media directory: {key}")
        return path

    def save(self, filename: str, content_type: str, data: bytes) -> StoredImage:
        key = generate_key(filename)
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise ImageStorageError(f"Could not write {key}: {e}") from e
        logger.debug("Image stored", key=key, size=len(data), content_type=content_type)
        return StoredImage(key=key, url=self.url(key))

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise ImageStorageError(f"Could not remove {key}: {e}") from e

    def read(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def url(self, key: str) -> str:
        return f"{self.url_prefix}/{key}"
