"""
Authentication utilities.
Signs and verifies the bearer JWTs issued to staff accounts.

Tokens embed the account identifier ("sub") and role, carry a unique "jti"
and expire after settings.jwt_expire_hours (one day by default).
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt
from fastapi import Header, Request

from shared.config.settings import Settings, settings
from shared.config.constants import Roles
from shared.config.logging import get_logger
from shared.utils.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    TokenMissingError,
)

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(
    payload: dict[str, Any],
    ttl_seconds: int | None = None,
    config: Settings | None = None,
) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, role, email).
        ttl_seconds: Token lifetime in seconds. Defaults to the configured expiry.
        config: Settings holding the secret, issuer and audience (module settings by default).

    Returns:
        Signed JWT token string.
    """
    config = config or settings
    if ttl_seconds is None:
        ttl_seconds = config.jwt_expire_hours * 60 * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": config.jwt_issuer,
        "aud": config.jwt_audience,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, config.jwt_secret, algorithm=JWT_ALGORITHM)


def sign_access_token(
    account_id: int,
    email: str,
    role: str,
    config: Settings | None = None,
) -> str:
    """Issue the bearer token returned by login and admin login."""
    return sign_jwt({"sub": str(account_id), "email": email, "role": role}, config=config)


def verify_jwt(token: str, config: Settings | None = None) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded token claims.

    Raises:
        TokenExpiredError: The token signature is valid but it has expired.
        TokenInvalidError: The token is malformed, tampered with, or lacks claims.
    """
    config = config or settings
    try:
        payload = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            audience=config.jwt_audience,
            issuer=config.jwt_issuer,
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message to the client
        logger.warning("JWT validation failed", error=str(e))
        raise TokenInvalidError()

    if "sub" not in payload:
        raise TokenInvalidError("Invalid token: missing subject claim")

    try:
        int(payload["sub"])
    except (ValueError, TypeError):
        raise TokenInvalidError("Invalid token: malformed subject claim")

    if payload.get("role") not in Roles.ALL:
        raise TokenInvalidError("Invalid token: malformed role claim")

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        TokenMissingError: Header absent or empty.
        TokenInvalidError: Header present but not "Bearer <token>".
    """
    if not authorization or not authorization.strip():
        raise TokenMissingError()
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        raise TokenInvalidError("Invalid Authorization header format. Expected: Bearer <token>")
    token = token.strip()
    if not token:
        raise TokenMissingError()
    return token


def current_user_context(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency that authenticates the caller.

    Usage:
        @router.get("/orders")
        def list_orders(ctx: dict = Depends(current_user_context)):
            account_id = get_account_id(ctx)

    Tokens are verified against the settings of the application context.

    Returns:
        Decoded claims: sub, email, role, iat, exp, jti.
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token, request.app.state.context.settings)


def get_account_id(ctx: dict[str, Any]) -> int:
    """Account identifier embedded in a verified token."""
    return int(ctx["sub"])
