"""
Common utilities shared across routers.
"""

from .dependencies import (
    current_account,
    current_account_id,
    get_account_service,
    require_admin,
)

__all__ = [
    "get_account_service",
    "current_account",
    "current_account_id",
    "require_admin",
]
