"""
CRUD support - generic data access.

Provides:
- BaseRepository: Typed data access with creation-ordered listings
"""

from .repository import BaseRepository

__all__ = ["BaseRepository"]
