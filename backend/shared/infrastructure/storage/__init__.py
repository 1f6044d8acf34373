"""
Product image storage.

Provides one interface to store uploaded images and remove them again,
backed either by the local filesystem or an S3-compatible blob store.
The backend is chosen with STORAGE_BACKEND ("local" by default).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol
from uuid import uuid4

from shared.config.settings import Settings, settings as default_settings


class ImageStorageError(Exception):
    """A backend failed to write or remove an object."""


@dataclass(frozen=True)
class StoredImage:
    """Reference returned by a backend after saving an image."""

    key: str
    url: str


class ImageStorage(Protocol):
    """Minimal protocol implemented by storage backends."""

    def save(self, filename: str, content_type: str, data: bytes) -> StoredImage:
        """Persist ``data`` and return its key and public URL."""

    def delete(self, key: str) -> None:
        """Remove the object stored under ``key``."""


def generate_key(filename: str, prefix: str = "products") -> str:
    """
    Build a collision-free object key that keeps the original extension.

    The client-supplied name never becomes part of the path.
    """
    suffix = PurePosixPath(filename or "").suffix.lower()
    return f"{prefix}/{uuid4().hex}{suffix}"


def create_storage(settings: Settings | None = None) -> ImageStorage:
    """Instantiate the backend selected by settings."""
    settings = settings or default_settings
    backend = settings.storage_backend.lower()

    if backend == "s3":
        from .s3_backend import S3ImageStorage

        return S3ImageStorage.from_settings(settings)

    from .local_backend import LocalImageStorage

    return LocalImageStorage(settings.media_dir, settings.media_url_prefix)


__all__ = ["ImageStorage", "ImageStorageError", "StoredImage", "create_storage", "generate_key"]
