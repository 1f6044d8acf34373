"""
Infrastructure module: Database, Redis/events and image storage.

Provides:
- Engine/session construction and transactions (db.py)
- Redis pub/sub broadcast publishing (events/)
- Product image storage backends (storage/)
"""

from shared.infrastructure.db import (
    build_engine,
    build_session_factory,
    get_db,
    session_scope,
    safe_commit,
)
from shared.infrastructure.events import (
    EventPublisher,
    create_publisher,
    close_redis_pool,
)
from shared.infrastructure.storage import ImageStorage, StoredImage, create_storage

__all__ = [
    # db
    "build_engine",
    "build_session_factory",
    "get_db",
    "session_scope",
    "safe_commit",
    # events
    "EventPublisher",
    "create_publisher",
    "close_redis_pool",
    # storage
    "ImageStorage",
    "StoredImage",
    "create_storage",
]
