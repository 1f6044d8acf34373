"""
Event System for Real-time Notifications via Redis pub/sub.

This package provides:
- event_types.py: Domain event names and their wire names
- event_schema.py: Broadcast envelope with validation
- redis_pool.py: Sync and async connection pool management
- publisher.py: EventPublisher protocol and implementations
- health_checks.py: Redis health check functions
"""

from .event_types import (
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
    ORDER_DELETED,
    PRODUCT_CREATED,
    PRODUCT_DELETED,
    WIRE_NAMES,
    ALL_WIRE_NAMES,
    MAX_EVENT_SIZE,
    wire_name,
)
from .event_schema import Event
from .redis_pool import (
    get_redis_pool,
    close_redis_pool,
    build_redis_sync_client,
)
from .health_checks import check_redis_async_health, check_redis_sync_health
from .publisher import (
    EventPublisher,
    RedisEventPublisher,
    LoggingEventPublisher,
    build_event,
    create_publisher,
)

__all__ = [
    # Event Types
    "ORDER_CREATED",
    "ORDER_STATUS_CHANGED",
    "ORDER_DELETED",
    "PRODUCT_CREATED",
    "PRODUCT_DELETED",
    "WIRE_NAMES",
    "ALL_WIRE_NAMES",
    "MAX_EVENT_SIZE",
    "wire_name",
    # Event Schema
    "Event",
    # Redis Pool
    "get_redis_pool",
    "close_redis_pool",
    "build_redis_sync_client",
    # Health Checks
    "check_redis_async_health",
    "check_redis_sync_health",
    # Publishing
    "EventPublisher",
    "RedisEventPublisher",
    "LoggingEventPublisher",
    "build_event",
    "create_publisher",
]
