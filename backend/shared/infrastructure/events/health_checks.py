"""
Redis Health Check Functions.
"""

from __future__ import annotations

from typing import Any

import redis

from shared.config.settings import settings
from shared.utils.health import (
    health_check_with_timeout,
    sync_health_check_with_timeout,
)
from .redis_pool import get_redis_pool


@health_check_with_timeout(timeout=3.0, component="redis_async")
async def check_redis_async_health() -> dict[str, Any]:
    """Ping through the async pool (used by the WebSocket gateway)."""
    pool = await get_redis_pool()
    await pool.ping()
    return {"type": "async", "max_connections": settings.redis_pool_max_connections}


@sync_health_check_with_timeout(timeout=3.0, component="redis")
def check_redis_sync_health(client: redis.Redis, channel: str) -> dict[str, Any]:
    """Ping through the REST publisher's own client."""
    client.ping()
    return {
        "type": "sync_pool",
        "max_connections": client.connection_pool.max_connections,
        "channel": channel,
    }
