"""
WebSocket Gateway main application.
Pushes broadcast events to every connected staff client in real time.

Clients connect to /ws?token=<jwt> with the same bearer token the REST API
issues. The gateway is receive-only from their point of view: it forwards
every envelope published on BROADCAST_CHANNEL and answers "ping" with "pong".
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from shared.config.logging import setup_logging, ws_gateway_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import build_engine, build_session_factory, session_scope
from shared.infrastructure.events import Event, check_redis_async_health, close_redis_pool
from shared.security.auth import get_account_id, verify_jwt
from ws_gateway.connection_manager import ConnectionManager
from ws_gateway.redis_subscriber import run_subscriber
from rest_api.core.cors import configure_cors
from rest_api.models import Account


# Global connection manager
manager = ConnectionManager()

# Clients only send heartbeats; anything larger is refused
MAX_MESSAGE_SIZE = 64 * 1024

# Delay before re-subscribing after the Redis connection is lost
SUBSCRIBER_RETRY_SECONDS = 5.0


async def dispatch_event(event: Event, raw: str) -> int:
    """Forward one envelope to every connected client."""
    sent = await manager.broadcast(raw)
    logger.debug("Dispatched broadcast event", event=event.event, clients=sent)
    return sent


async def start_redis_subscriber() -> None:
    """Keep a subscription to the broadcast channel alive until cancelled."""
    while True:
        try:
            await run_subscriber(dispatch_event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                "Redis subscriber error, retrying",
                error=str(e),
                retry_in=SUBSCRIBER_RETRY_SECONDS,
            )
            await asyncio.sleep(SUBSCRIBER_RETRY_SECONDS)


async def start_heartbeat_cleanup() -> None:
    """Every 30 seconds, close connections that stopped sending heartbeats."""
    while True:
        await asyncio.sleep(30)
        cleaned = await manager.cleanup_stale_connections()
        if cleaned > 0:
            logger.info("Cleaned up stale connections", count=cleaned)


def account_exists(session_factory: sessionmaker[Session], account_id: int) -> bool:
    with session_scope(session_factory) as db:
        return db.get(Account, account_id) is not None


async def _cancel(task: asyncio.Task | None) -> None:
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Starts the Redis subscriber (when broadcasting is enabled) and the
    stale-connection cleanup task. Opens a database session factory for
    account checks unless app.state.session_factory is already set.
    """
    setup_logging(settings)
    logger.info("Starting WebSocket Gateway", port=settings.ws_gateway_port, env=settings.environment)

    engine = None
    if getattr(app.state, "session_factory", None) is None:
        engine = build_engine(settings.database_url)
        app.state.session_factory = build_session_factory(engine)

    subscriber_task = None
    if settings.broadcast_enabled:
        subscriber_task = asyncio.create_task(start_redis_subscriber())
    else:
        logger.warning("Broadcast disabled, gateway will not receive events")
    cleanup_task = asyncio.create_task(start_heartbeat_cleanup())

    yield

    logger.info("Shutting down WebSocket Gateway")
    await _cancel(subscriber_task)
    await _cancel(cleanup_task)
    await manager.shutdown()

    await close_redis_pool()
    if engine is not None:
        engine.dispose()
        app.state.session_factory = None


app = FastAPI(
    title="Comanda WebSocket Gateway",
    description="Real-time order and catalog notifications for restaurant staff",
    version="1.0.0",
    lifespan=lifespan,
)

configure_cors(app, settings)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/ws/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "ws-gateway",
        "environment": settings.environment,
        **manager.get_stats(),
    }


@app.get("/ws/health/detailed")
async def detailed_health_check():
    """
    Detailed health check that verifies Redis connectivity.
    Returns 503 when Redis is unreachable.
    """
    redis_result = await check_redis_async_health()
    body = {
        "service": "ws-gateway",
        "environment": settings.environment,
        "connections": manager.get_stats(),
        "dependencies": {redis_result.component: redis_result.to_dict()},
        "status": "healthy" if redis_result.healthy else "degraded",
    }
    if not redis_result.healthy:
        return JSONResponse(content=body, status_code=503)
    return body


# =============================================================================
# WebSocket Endpoint
# =============================================================================


@app.websocket("/ws")
async def staff_websocket(
    websocket: WebSocket,
    token: str = Query(..., description="JWT token"),
):
    """
    WebSocket endpoint for staff clients (waiters and admins).

    Every client receives:
    - orders@new, order@checked, order@deleted
    - products@new, products@deleted

    Messages are the broadcast envelope {"event", "payload", "ts"}.
    """
    try:
        claims = verify_jwt(token)
    except HTTPException as e:
        await websocket.close(code=4001, reason=str(e.detail))
        return

    account_id = get_account_id(claims)
    if not await run_in_threadpool(account_exists, websocket.app.state.session_factory, account_id):
        await websocket.close(code=4001, reason="Invalid token: account no longer exists")
        return

    try:
        await manager.connect(websocket, account_id)
    except ConnectionError as e:
        logger.warning("WebSocket connection refused", account_id=account_id, error=str(e))
        return
    logger.info("Staff connected", account_id=account_id, role=claims.get("role"))

    try:
        while True:
            data = await websocket.receive_text()

            if len(data) > MAX_MESSAGE_SIZE:
                logger.warning(
                    "Message size exceeded limit",
                    account_id=account_id,
                    size=len(data),
                    max_size=MAX_MESSAGE_SIZE,
                )
                await websocket.close(code=1009, reason="Message too large")
                break

            manager.record_heartbeat(websocket)
            if data == "ping":
                await websocket.send_text("pong")
            elif data == '{"type":"ping"}':
                await websocket.send_text('{"type":"pong"}')
            else:
                logger.debug(
                    "Unknown message from client",
                    account_id=account_id,
                    message=data[:100],
                )
    except WebSocketDisconnect:
        logger.info("Staff disconnected", account_id=account_id)
    finally:
        await manager.disconnect(websocket)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ws_gateway.main:app",
        host="0.0.0.0",
        port=settings.ws_gateway_port,
        reload=settings.debug,
    )
