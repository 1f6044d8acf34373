"""
WebSocket connection manager.
Tracks active staff connections and fans broadcast events out to all of them.

Every connected client receives every event; there is no per-client
filtering and no acknowledgement. A socket that fails a send is dropped.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from shared.config.logging import ws_gateway_logger as logger

# Maximum simultaneous connections per account (several devices per waiter)
MAX_CONNECTIONS_PER_ACCOUNT = 5


def _is_ws_connected(ws: WebSocket) -> bool:
    """True when the socket can still send and receive."""
    return (
        ws.client_state == WebSocketState.CONNECTED
        and ws.application_state == WebSocketState.CONNECTED
    )


class ConnectionManager:
    """
    Manages WebSocket connections for real-time notifications.

    Connections are indexed by account_id so the per-account limit can be
    enforced; broadcasts go to every registered socket.
    Dict modifications are serialized with an asyncio.Lock.
    """

    # Consider a connection dead after this long without any client message
    HEARTBEAT_TIMEOUT = 60
    MAX_CONNECTIONS_PER_ACCOUNT = MAX_CONNECTIONS_PER_ACCOUNT

    def __init__(self):
        self._shutdown = False
        self.by_account: dict[int, set[WebSocket]] = {}
        self._ws_to_account: dict[WebSocket, int] = {}
        self._last_heartbeat: dict[WebSocket, float] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, account_id: int, timeout: float = 5.0) -> None:
        """
        Accept a WebSocket connection and register it.

        Raises:
            ConnectionError: Shutting down, handshake timed out, or too many
                connections for this account (the socket is closed with 1008).
        """
        if self._shutdown:
            raise ConnectionError("Server is shutting down")

        try:
            await asyncio.wait_for(websocket.accept(), timeout=timeout)
        except asyncio.TimeoutError:
            raise ConnectionError("WebSocket accept timed out")

        # Limit check and registration are atomic
        async with self._lock:
            sockets = self.by_account.setdefault(account_id, set())
            accepted = len(sockets) < self.MAX_CONNECTIONS_PER_ACCOUNT
            if accepted:
                sockets.add(websocket)
                self._ws_to_account[websocket] = account_id
                self._last_heartbeat[websocket] = time.time()

        if not accepted:
            await websocket.close(code=1008, reason="Too many connections")
            raise ConnectionError(
                f"Account {account_id} exceeded max connections ({self.MAX_CONNECTIONS_PER_ACCOUNT})"
            )

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a WebSocket connection. Unknown sockets are ignored."""
        async with self._lock:
            self._last_heartbeat.pop(websocket, None)
            account_id = self._ws_to_account.pop(websocket, None)
            if account_id is not None and account_id in self.by_account:
                self.by_account[account_id].discard(websocket)
                if not self.by_account[account_id]:
                    del self.by_account[account_id]

    async def broadcast(self, message: str) -> int:
        """
        Send an already-serialized envelope to all connected clients.

        Returns:
            Number of connections that received the message.
        """
        connections = list(self._ws_to_account)
        live = [ws for ws in connections if _is_ws_connected(ws)]
        dead = [ws for ws in connections if ws not in live]

        # A failed send only drops that client
        results = await asyncio.gather(
            *(ws.send_text(message) for ws in live),
            return_exceptions=True,
        )
        sent = 0
        for ws, result in zip(live, results):
            if isinstance(result, Exception):
                logger.warning("Failed to send to client, dropping it", error=str(result))
                dead.append(ws)
            else:
                sent += 1

        for ws in dead:
            await self.disconnect(ws)
        return sent

    @property
    def total_connections(self) -> int:
        """Get total number of active connections."""
        return len(self._ws_to_account)

    def get_stats(self) -> dict[str, Any]:
        """Get connection statistics."""
        return {
            "total_connections": self.total_connections,
            "accounts_connected": len(self.by_account),
        }

    # =========================================================================
    # Heartbeat tracking
    # =========================================================================

    def record_heartbeat(self, websocket: WebSocket) -> None:
        """Record activity from a connection."""
        self._last_heartbeat[websocket] = time.time()

    def get_stale_connections(self) -> list[WebSocket]:
        """Connections that have been silent longer than HEARTBEAT_TIMEOUT."""
        now = time.time()
        return [
            ws
            for ws, last_time in list(self._last_heartbeat.items())
            if now - last_time > self.HEARTBEAT_TIMEOUT
        ]

    async def cleanup_stale_connections(self) -> int:
        """
        Close and remove stale connections.

        Returns:
            Number of connections cleaned up.
        """
        stale = self.get_stale_connections()
        for ws in stale:
            try:
                await ws.close(code=1001, reason="Heartbeat timeout")
            except Exception as e:
                logger.warning("Failed to close stale connection", error=str(e))
            await self.disconnect(ws)
        return len(stale)

    async def shutdown(self) -> int:
        """
        Close all connections and reject new ones.

        Returns:
            Number of connections closed.
        """
        self._shutdown = True
        logger.info("WebSocket manager shutting down")

        async with self._lock:
            connections = list(self._ws_to_account)

        closed = 0
        for ws in connections:
            try:
                await ws.close(code=1001, reason="Server shutdown")
                closed += 1
            except Exception as e:
                logger.warning("Failed to close connection during shutdown", error=str(e))
            await self.disconnect(ws)

        logger.info("WebSocket shutdown complete", closed=closed)
        return closed

    def is_shutting_down(self) -> bool:
        return self._shutdown
