"""
Centralized constants for the backend application.

Usage:
    from shared.config.constants import Roles, OrderStatus

    if account.role == Roles.ADMIN:
        ...

    if order.status == OrderStatus.PENDING:
        ...
"""

from typing import Final


# =============================================================================
# Account Roles
# =============================================================================


class Roles:
    """Account role constants."""

    WAITER: Final[str] = "waiter"
    ADMIN: Final[str] = "admin"

    ALL: Final[list[str]] = [WAITER, ADMIN]
    DEFAULT: Final[str] = WAITER


# Role toggle: each role maps to the other one
ROLE_TOGGLE: Final[dict[str, str]] = {
    Roles.WAITER: Roles.ADMIN,
    Roles.ADMIN: Roles.WAITER,
}


# =============================================================================
# Order Status
# =============================================================================


class OrderStatus:
    """Order status constants. Orders flip between the two values until deleted."""

    PENDING: Final[str] = "pending"
    COMPLETED: Final[str] = "completed"

    ALL: Final[list[str]] = [PENDING, COMPLETED]


ORDER_STATUS_TOGGLE: Final[dict[str, str]] = {
    OrderStatus.PENDING: OrderStatus.COMPLETED,
    OrderStatus.COMPLETED: OrderStatus.PENDING,
}


# =============================================================================
# Product Images
# =============================================================================


ALLOWED_IMAGE_CONTENT_TYPES: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif"}
)
ALLOWED_IMAGE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".jpeg", ".jpg", ".png", ".gif"}
)


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 999

    MAX_NAME_LENGTH: Final[int] = 200
    MAX_EMAIL_LENGTH: Final[int] = 254
    MAX_PASSWORD_LENGTH: Final[int] = 128
