"""
Health Check Utilities.

Decorators that give every dependency check the same timeout handling
and response format.

Usage:
    from shared.utils.health import health_check_with_timeout

    @health_check_with_timeout(timeout=3.0, component="redis")
    async def check_redis():
        await redis.ping()
        return {"pool_size": 10}

    # Returns HealthCheckResult(status=HEALTHY, component="redis", ...)
    # On timeout: HealthCheckResult(status=UNHEALTHY, error="timeout after 3.0s")
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import functools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Coroutine

from shared.config.logging import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    """Health check status values."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class HealthCheckResult:
    """Result of a single dependency check."""
    status: HealthStatus
    component: str
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "status": self.status.value,
            "component": self.component,
        }
        if self.latency_ms is not None:
            result["latency_ms"] = round(self.latency_ms, 2)
        if self.error:
            result["error"] = self.error
        if self.details:
            result["details"] = self.details
        return result


def _unhealthy(component: str, start_time: float, error: str) -> HealthCheckResult:
    return HealthCheckResult(
        status=HealthStatus.UNHEALTHY,
        component=component,
        latency_ms=(time.perf_counter() - start_time) * 1000,
        error=error,
    )


def _healthy(component: str, start_time: float, result: Any) -> HealthCheckResult:
    return HealthCheckResult(
        status=HealthStatus.HEALTHY,
        component=component,
        latency_ms=(time.perf_counter() - start_time) * 1000,
        details=result if isinstance(result, dict) else {},
    )


def health_check_with_timeout(
    timeout: float = 5.0,
    component: str | None = None,
):
    """
    Decorator for async health check functions with timeout protection.

    The wrapped coroutine returns a HealthCheckResult and never raises.
    """
    def decorator(
        func: Callable[..., Coroutine[Any, Any, dict[str, Any] | None]]
    ) -> Callable[..., Coroutine[Any, Any, HealthCheckResult]]:
        comp_name = component or func.__name__.replace("check_", "").replace("_health", "")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> HealthCheckResult:
            start_time = time.perf_counter()
            try:
                result = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning("Health check timeout", component=comp_name, timeout=timeout)
                return _unhealthy(comp_name, start_time, f"timeout after {timeout}s")
            except Exception as e:
                logger.warning("Health check failed", component=comp_name, error=str(e))
                return _unhealthy(comp_name, start_time, str(e))
            return _healthy(comp_name, start_time, result)

        return wrapper
    return decorator


def sync_health_check_with_timeout(
    timeout: float = 5.0,
    component: str | None = None,
):
    """
    Decorator for synchronous health check functions with timeout protection.

    Runs the check in a worker thread so a hung connection cannot block
    the caller longer than `timeout`.
    """
    def decorator(
        func: Callable[..., dict[str, Any] | None]
    ) -> Callable[..., HealthCheckResult]:
        comp_name = component or func.__name__.replace("check_", "").replace("_health", "")

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> HealthCheckResult:
            start_time = time.perf_counter()
            executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
            try:
                future = executor.submit(func, *args, **kwargs)
                result = future.result(timeout=timeout)
            except concurrent.futures.TimeoutError:
                logger.warning("Sync health check timeout", component=comp_name, timeout=timeout)
                return _unhealthy(comp_name, start_time, f"timeout after {timeout}s")
            except Exception as e:
                logger.warning("Sync health check failed", component=comp_name, error=str(e))
                return _unhealthy(comp_name, start_time, str(e))
            finally:
                executor.shutdown(wait=False)
            return _healthy(comp_name, start_time, result)

        return wrapper
    return decorator


def aggregate_health_results(results: list[HealthCheckResult]) -> dict[str, Any]:
    """
    Combine individual results into the detailed health payload.

    Returns:
        {"status": "healthy" | "degraded", "components": {name: result}}
    """
    all_healthy = all(result.healthy for result in results)
    return {
        "status": HealthStatus.HEALTHY.value if all_healthy else HealthStatus.DEGRADED.value,
        "components": {result.component: result.to_dict() for result in results},
    }
