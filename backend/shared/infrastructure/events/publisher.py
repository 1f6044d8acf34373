"""
Broadcast Publishing.

Services announce state changes through an EventPublisher:

    publisher.publish(ORDER_CREATED, resolved_order)

Publishing is fire-and-forget. The caller's transaction has already been
committed when publish() runs, and publish() never raises: delivery
failures are logged and dropped.
"""

from __future__ import annotations

from typing import Any, Protocol

import redis

from shared.config.settings import Settings, settings
from shared.config.logging import get_logger
from .event_schema import Event
from .event_types import MAX_EVENT_SIZE, wire_name
from .redis_pool import build_redis_sync_client

logger = get_logger(__name__)


class EventPublisher(Protocol):
    """One-way broadcast channel consumed by real-time clients."""

    def publish(self, event_name: str, payload: Any) -> None: ...

    def close(self) -> None: ...


def build_event(event_name: str, payload: Any) -> Event | None:
    """
    Wrap a payload in the broadcast envelope.

    Returns None (and logs) when the name is unknown or the envelope is
    larger than MAX_EVENT_SIZE.
    """
    try:
        event = Event(event=wire_name(event_name), payload=payload)
    except ValueError as e:
        logger.error("Dropping malformed event", event_name=event_name, error=str(e))
        return None

    size = len(event.to_json().encode("utf-8"))
    if size > MAX_EVENT_SIZE:
        logger.error(
            "Dropping oversized event",
            event_name=event_name,
            size=size,
            max_size=MAX_EVENT_SIZE,
        )
        return None
    return event


class RedisEventPublisher:
    """
    Publishes envelopes to a Redis pub/sub channel.

    The WebSocket gateway subscribes to the same channel and fans each
    message out to every connected client.
    """

    def __init__(
        self,
        channel: str | None = None,
        client: redis.Redis | None = None,
        config: Settings | None = None,
    ):
        self._config = config or settings
        self.channel = channel or self._config.broadcast_channel
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = build_redis_sync_client(self._config)
        return self._client

    def publish(self, event_name: str, payload: Any) -> None:
        event = build_event(event_name, payload)
        if event is None:
            return

        try:
            receivers = self.client.publish(self.channel, event.to_json())
        except redis.RedisError as e:
            logger.warning(
                "Broadcast publish failed",
                channel=self.channel,
                event=event.event,
                error=str(e),
            )
            return

        logger.debug(
            "Broadcast published",
            channel=self.channel,
            event=event.event,
            receivers=receivers,
        )

    def close(self) -> None:
        if self._client is None:
            return
        try:
            self._client.connection_pool.disconnect()
        except redis.RedisError as e:
            logger.warning("Error closing Redis publisher", error=str(e))
        self._client = None


class LoggingEventPublisher:
    """
    Publisher used when BROADCAST_ENABLED is false.

    Events are validated and logged but go nowhere.
    """

    def publish(self, event_name: str, payload: Any) -> None:
        event = build_event(event_name, payload)
        if event is not None:
            logger.info("Broadcast disabled, event not sent", event=event.event)

    def close(self) -> None:
        return None


def create_publisher(config: Settings | None = None) -> EventPublisher:
    """Pick the publisher matching BROADCAST_ENABLED in the given settings."""
    config = config or settings
    if config.broadcast_enabled:
        return RedisEventPublisher(config=config)
    return LoggingEventPublisher()
