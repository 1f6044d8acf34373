"""
Structured logging for the backend.

Loggers accept keyword fields:

    orders_logger.info("Order closed", order_id=12, table_id=3)

Fields naming a domain entity (order, table, account, product) are grouped
under "context" in the JSON output, the rest under "data". The request id
and the authenticated account of the current request are attached by
RequestContextFilter.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import Settings, settings

CONTEXT_FIELDS = ("order_id", "table_id", "account_id", "product_id")


def split_fields(record: logging.LogRecord) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split the keyword fields of a record into (context, data)."""
    fields = getattr(record, "fields", None) or {}
    context = {key: fields[key] for key in CONTEXT_FIELDS if key in fields}
    data = {key: value for key, value in fields.items() if key not in context}

    # Fall back to the caller's account when the log line does not name one
    bound_account = getattr(record, "account_id", None)
    if "account_id" not in context and bound_account is not None:
        context["account_id"] = bound_account
    return context, data


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for production log shipping."""

    def __init__(self, include_source: bool = False):
        super().__init__()
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            entry["request_id"] = request_id

        context, data = split_fields(record)
        if context:
            entry["context"] = context
        if data:
            entry["data"] = data

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            entry["source"] = f"{record.pathname}:{record.lineno}"

        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """
    Colored single-line output.

        [12:01:07] INFO     [3f2a9c1d acct=7] rest_api.orders: Order created (order_id=12, table_id=3)
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        context, data = split_fields(record)

        tags = []
        request_id = getattr(record, "request_id", None)
        if request_id:
            tags.append(request_id[:8])
        if "account_id" in context:
            tags.append(f"acct={context.pop('account_id')}")
        tag_str = f"{self.DIM}[{' '.join(tags)}]{self.RESET} " if tags else ""

        line = (
            f"{color}[{timestamp}] {record.levelname:8}{self.RESET} "
            f"{tag_str}{record.name}: {record.getMessage()}"
        )

        pairs = {**context, **data}
        if pairs:
            line += " (" + ", ".join(f"{k}={v}" for k, v in pairs.items()) + ")"

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take arbitrary keyword fields."""

    def _log(
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **fields: Any,
    ) -> None:
        extra = dict(extra or {})
        extra["fields"] = fields
        # Skip this frame so records point at the caller
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


logging.setLoggerClass(StructuredLogger)


def setup_logging(config: Settings | None = None) -> None:
    """
    Install the stdout handler on the root logger.

    Production gets JSON lines; every other environment gets the colored
    development format. Call once at startup.
    """
    # Import here to avoid circular imports
    from shared.infrastructure.correlation import RequestContextFilter

    config = config or settings
    log_level = logging.DEBUG if config.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(RequestContextFilter())
    if config.environment == "production":
        handler.setFormatter(StructuredFormatter(include_source=config.debug))
    else:
        handler.setFormatter(DevelopmentFormatter())

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    for noisy in ("uvicorn.access", "httpx", "httpcore", "botocore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a logger instance with the given name.

    Usage:
        from shared.config.logging import get_logger
        logger = get_logger(__name__)

        logger.info("Order created", order_id=12, table_id=3)
        logger.error("Failed to store image", key=key, exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore


def mask_email(email: str | None) -> str:
    """Mask an email for logging: "waiter@example.com" becomes "wa***@example.com"."""
    if not email or "@" not in email:
        return "<no-email>" if not email else "***@invalid"

    local, domain = email.split("@", 1)
    if not local:
        return f"***@{domain}"
    return f"{local[:2]}***@{domain}"


rest_api_logger = get_logger("rest_api")
auth_logger = get_logger("rest_api.auth")
orders_logger = get_logger("rest_api.orders")
catalog_logger = get_logger("rest_api.catalog")
ws_gateway_logger = get_logger("ws_gateway")
