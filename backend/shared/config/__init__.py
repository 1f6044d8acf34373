"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings, get_settings, Settings
from shared.config.logging import get_logger, setup_logging, mask_email
from shared.config.constants import (
    Roles,
    OrderStatus,
    Limits,
    ROLE_TOGGLE,
    ORDER_STATUS_TOGGLE,
)

__all__ = [
    # settings
    "settings",
    "get_settings",
    "Settings",
    # logging
    "get_logger",
    "setup_logging",
    "mask_email",
    # constants
    "Roles",
    "OrderStatus",
    "Limits",
    "ROLE_TOGGLE",
    "ORDER_STATUS_TOGGLE",
]
