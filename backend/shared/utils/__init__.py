"""
Utilities module: Exceptions, validators, schemas, batch loading, health checks.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ForbiddenError,
    ValidationError,
    ConflictError,
    AuthError,
    InternalError,
)
from shared.utils.validators import (
    normalize_email,
    validate_image_upload,
)
from shared.utils.batch_loading import DataLoader

__all__ = [
    # exceptions
    "AppException",
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "ConflictError",
    "AuthError",
    "InternalError",
    # validators
    "normalize_email",
    "validate_image_upload",
    # batch loading
    "DataLoader",
]
