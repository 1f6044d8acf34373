"""
Redis Connection Pool Management.

The REST publisher owns a sync client built from its settings; the
WebSocket gateway subscribes through the shared async pool.
"""

from __future__ import annotations

import asyncio
import threading

import redis
import redis.asyncio as aioredis

from shared.config.settings import Settings, settings
from shared.config.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Async Redis Pool
# =============================================================================

_redis_pool: aioredis.Redis | None = None
_redis_pool_lock: asyncio.Lock | None = None
_pool_lock_init = threading.Lock()


def _get_pool_lock() -> asyncio.Lock:
    """
    Get or create the pool lock (lazy initialization for event loop safety).
    """
    global _redis_pool_lock
    if _redis_pool_lock is None:
        with _pool_lock_init:
            if _redis_pool_lock is None:
                _redis_pool_lock = asyncio.Lock()
    return _redis_pool_lock


async def get_redis_pool(redis_url: str | None = None) -> aioredis.Redis:
    """
    Get or create the async Redis client singleton.

    The first caller picks the URL (REDIS_URL when none is given).
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    async with _get_pool_lock():
        # Another coroutine may have initialized it while we waited
        if _redis_pool is None:
            _redis_pool = aioredis.from_url(
                redis_url or settings.redis_url,
                max_connections=settings.redis_pool_max_connections,
                decode_responses=True,
                socket_connect_timeout=settings.redis_socket_timeout,
                health_check_interval=30,
            )
            logger.info(
                "Redis async pool initialized",
                max_connections=settings.redis_pool_max_connections,
                timeout=settings.redis_socket_timeout,
            )
    return _redis_pool


async def close_redis_pool() -> None:
    """Close the async pool on application shutdown."""
    global _redis_pool, _redis_pool_lock

    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Redis async pool closed")
    _redis_pool_lock = None


# =============================================================================
# Sync Redis Client
# =============================================================================


def build_redis_sync_client(config: Settings | None = None) -> redis.Redis:
    """
    Build a Redis client over its own connection pool.

    Request handlers run in a thread pool, so each publish borrows a
    connection from the pool instead of sharing one socket. The owner
    disconnects the pool with client.connection_pool.disconnect().
    """
    config = config or settings
    pool = redis.ConnectionPool.from_url(
        config.redis_url,
        max_connections=config.redis_sync_pool_max_connections,
        decode_responses=True,
        socket_connect_timeout=config.redis_socket_timeout,
        socket_timeout=config.redis_socket_timeout,
        health_check_interval=30,
    )
    logger.info(
        "Redis sync pool initialized",
        max_connections=config.redis_sync_pool_max_connections,
        timeout=config.redis_socket_timeout,
    )
    return redis.Redis(connection_pool=pool)
