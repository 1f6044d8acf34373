"""
Health check endpoints for the REST API.
Provides basic and detailed health status of the service and its dependencies.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from rest_api.core.context import AppContext, get_context
from shared.infrastructure.db import session_scope
from shared.infrastructure.events import RedisEventPublisher, check_redis_sync_health
from shared.utils.health import (
    aggregate_health_results,
    sync_health_check_with_timeout,
)


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check(context: AppContext = Depends(get_context)):
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return {
        "status": "healthy",
        "service": "rest-api",
        "environment": context.settings.environment,
    }


@sync_health_check_with_timeout(timeout=3.0, component="database")
def check_database_health(session_factory: sessionmaker[Session]) -> dict:
    """Check database connectivity."""
    with session_scope(session_factory) as db:
        db.execute(text("SELECT 1"))
    return {"dialect": session_factory.kw["bind"].dialect.name}


@router.get("/health/detailed")
def detailed_health_check(context: AppContext = Depends(get_context)):
    """
    Detailed health check that verifies connectivity to dependencies.

    The database is always checked; Redis only when the context publishes
    through it (BROADCAST_ENABLED).
    Returns 503 Service Unavailable if any dependency is down.
    """
    results = [check_database_health(context.session_factory)]
    if isinstance(context.publisher, RedisEventPublisher):
        publisher = context.publisher
        results.append(check_redis_sync_health(publisher.client, publisher.channel))

    health = aggregate_health_results(results)
    body = {
        "service": "rest-api",
        "environment": context.settings.environment,
        "status": health["status"],
        "dependencies": health["components"],
    }

    if health["status"] != "healthy":
        return JSONResponse(content=body, status_code=503)
    return body
