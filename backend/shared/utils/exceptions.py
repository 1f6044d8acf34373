"""
Centralized HTTP exceptions for consistent error handling.

Every failure a client can observe belongs to one of these kinds; the
handlers in rest_api.core.errors render them with a single envelope:

    {"detail": "<message>", "code": "<CODE>"}

Usage:
    from shared.utils.exceptions import NotFoundError, ForbiddenError, ValidationError

    raise NotFoundError("Product", product_id)
    raise ForbiddenError("Admin access required")
    raise ValidationError("Price must be positive", field="price")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class so that every
    error is logged once and rendered with the same response shape.
    """

    code: str = "HTTP_ERROR"

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, code=self.code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def to_body(self) -> dict[str, Any]:
        """Response body for this error."""
        return {"detail": self.detail, "code": self.code}


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Missing or malformed input (400).

    Usage:
        raise ValidationError("Imagem é obrigatória", field="image")
    """

    code = "VALIDATION_ERROR"

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class EmptyOrderError(ValidationError):
    """Order submitted without line items."""

    def __init__(self, **log_context: Any):
        super().__init__("Order must contain at least one item", field="items", **log_context)


class InvalidImageError(ValidationError):
    """Uploaded image failed the type, extension or size check."""

    def __init__(self, reason: str, **log_context: Any):
        super().__init__(reason, field="image", **log_context)


# =============================================================================
# 401 Unauthorized Errors
# =============================================================================


class AuthError(AppException):
    """
    Authentication failure (401).

    `reason` tells the client why: "missing", "expired", "invalid" for
    bearer tokens, "credentials" for failed logins.
    """

    code = "AUTH_ERROR"

    def __init__(self, detail: str, reason: str = "invalid", **log_context: Any):
        self.reason = reason
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            headers={"WWW-Authenticate": "Bearer"},
            reason=reason,
            **log_context,
        )

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["reason"] = self.reason
        return body


class InvalidCredentialsError(AuthError):
    """Email not found or password mismatch."""

    def __init__(self, **log_context: Any):
        super().__init__("Invalid credentials", reason="credentials", **log_context)


class TokenMissingError(AuthError):
    def __init__(self, detail: str = "Missing bearer token", **log_context: Any):
        super().__init__(detail, reason="missing", **log_context)


class TokenExpiredError(AuthError):
    def __init__(self, **log_context: Any):
        super().__init__("Token has expired", reason="expired", **log_context)


class TokenInvalidError(AuthError):
    def __init__(self, detail: str = "Invalid token", **log_context: Any):
        super().__init__(detail, reason="invalid", **log_context)


# =============================================================================
# 403 Forbidden Errors
# =============================================================================


class ForbiddenError(AppException):
    """
    Role-insufficient access (403).

    Usage:
        raise ForbiddenError()
        raise ForbiddenError("Admin access required", account_id=account_id)
    """

    code = "FORBIDDEN"

    def __init__(self, detail: str = "Admin access required", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Product", 123)
        raise NotFoundError("Account")
    """

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        self.entity = entity
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: int | None = None, **log_context: Any):
        super().__init__("Order", order_id, **log_context)


class TableNotFoundError(NotFoundError):
    def __init__(self, table_id: int | None = None, **log_context: Any):
        super().__init__("Table", table_id, **log_context)


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int | None = None, **log_context: Any):
        super().__init__("Product", product_id, **log_context)


class AccountNotFoundError(NotFoundError):
    def __init__(self, account_id: int | None = None, **log_context: Any):
        super().__init__("Account", account_id, **log_context)


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Unique-constraint violation (409).

    Usage:
        raise ConflictError("Email already registered", field="email")
    """

    code = "CONFLICT"

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class DuplicateEntityError(ConflictError):
    """Entity already exists."""

    def __init__(self, entity: str, identifier: str | int | None = None, **log_context: Any):
        if identifier is not None:
            detail = f"{entity} '{identifier}' already exists"
        else:
            detail = f"{entity} already exists"

        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Storage or unexpected failure (500).

    Usage:
        raise InternalError("Failed to store image", key=key)
    """

    code = "INTERNAL_ERROR"

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error while trying to {operation}"
        super().__init__(detail, operation=operation, **log_context)


class StorageError(InternalError):
    """Image storage collaborator failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Image storage error while trying to {operation}"
        super().__init__(detail, operation=operation, **log_context)
