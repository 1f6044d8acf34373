"""
Redis pub/sub subscriber for the WebSocket gateway.
Listens on the broadcast channel and hands every valid envelope to a callback.

Messages that are not valid envelopes (bad JSON, unknown event name, over
MAX_EVENT_SIZE) are logged and skipped.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.events import Event, MAX_EVENT_SIZE, get_redis_pool

logger = get_logger(__name__)


def parse_event(raw: str | bytes) -> Event | None:
    """Validate a raw channel message. Returns None for anything that is not an envelope."""
    if len(raw) > MAX_EVENT_SIZE:
        logger.warning("Broadcast message too large", size=len(raw), max_size=MAX_EVENT_SIZE)
        return None
    try:
        return Event.from_json(raw)
    except ValueError as e:
        logger.warning("Invalid broadcast message", error=str(e))
        return None


async def run_subscriber(
    on_event: Callable[[Event, str], Awaitable[None]],
    channel: str | None = None,
) -> None:
    """
    Subscribe to the broadcast channel and dispatch messages.

    Runs until cancelled. `on_event` receives the parsed envelope and the
    raw JSON text, so it can forward the message without re-serializing.

    Args:
        on_event: Async callback for each valid envelope.
        channel: Channel name (defaults to BROADCAST_CHANNEL).
    """
    channel = channel or settings.broadcast_channel
    redis_pool = await get_redis_pool()
    pubsub = redis_pool.pubsub()
    await pubsub.subscribe(channel)

    logger.info("Redis subscriber started", channel=channel)

    try:
        async for msg in pubsub.listen():
            if msg is None or msg.get("type") != "message":
                continue

            raw = msg["data"]
            event = parse_event(raw)
            if event is None:
                continue

            try:
                await on_event(event, raw if isinstance(raw, str) else raw.decode("utf-8"))
            except Exception as e:
                # One failing dispatch must not stop the subscriber loop
                logger.error(
                    "Error dispatching broadcast event",
                    event=event.event,
                    error=str(e),
                    exc_info=True,
                )
    except asyncio.CancelledError:
        logger.info("Redis subscriber cancelled")
        raise
    finally:
        await pubsub.unsubscribe(channel)
        await pubsub.aclose()
