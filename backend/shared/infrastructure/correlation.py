"""
Per-request context for log lines.

RequestContextMiddleware tags each HTTP request with an X-Request-ID
(taken from the client or generated) and echoes it on the response. Once
the bearer token is verified, bind_account() records the caller so every
later log line of the request names the account.
"""

import logging
import uuid
from contextvars import ContextVar
from dataclasses import dataclass

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass
class RequestContext:
    request_id: str
    account_id: int | None = None


# Sync dependencies run in a copied context, so they mutate this object
# rather than setting the variable.
_current: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


def current_request() -> RequestContext | None:
    return _current.get()


def bind_account(account_id: int) -> None:
    """Attach the authenticated account to the current request, if any."""
    ctx = _current.get()
    if ctx is not None:
        ctx.account_id = account_id


class RequestContextMiddleware:
    """Pure ASGI middleware; websocket and lifespan scopes pass through."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = Headers(scope=scope).get(REQUEST_ID_HEADER)
        ctx = RequestContext(request_id=incoming or uuid.uuid4().hex)

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = ctx.request_id
            await send(message)

        token = _current.set(ctx)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            _current.reset(token)


class RequestContextFilter(logging.Filter):
    """Copies request_id and account_id of the active request onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _current.get()
        record.request_id = ctx.request_id if ctx else None
        record.account_id = ctx.account_id if ctx else None
        return True
