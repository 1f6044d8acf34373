"""
Rate limiting utilities using slowapi.
Protects the credential endpoints from brute-force attempts.

Usage:
    from shared.security.rate_limit import limiter, LOGIN_RATE_LIMIT

    @router.post("/login")
    @limiter.limit(LOGIN_RATE_LIMIT)
    def login(request: Request, ...):
        ...
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shared.config.settings import settings
from shared.config.logging import get_logger

logger = get_logger(__name__)

LOGIN_RATE_LIMIT = settings.login_rate_limit

# Client IP is the key; in-memory storage per process
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Render rate limit errors with the common error envelope.
    """
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client=get_remote_address(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "code": "RATE_LIMITED",
        },
        headers={"Retry-After": "60"},
    )
