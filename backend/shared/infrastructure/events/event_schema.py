"""
Event Schema.

Defines the broadcast envelope shared by the REST publisher and the
WebSocket gateway:

    {"event": "orders@new", "payload": {...}, "ts": "2024-05-01T12:00:00+00:00"}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any

from .event_types import ALL_WIRE_NAMES


@dataclass
class Event:
    """
    Broadcast envelope.

    `event` is always a wire name; `payload` is any JSON-serializable value
    (a resolved order, a product, or {"id": ...} for deletions).
    """

    event: str
    payload: Any = None
    ts: str | None = None

    def __post_init__(self) -> None:
        if not self.event or not isinstance(self.event, str):
            raise ValueError("Event name must be a non-empty string")

        if self.event not in ALL_WIRE_NAMES:
            raise ValueError(f"Unknown event name: {self.event}")

        if self.ts is None:
            self.ts = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize event to JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    @classmethod
    def from_json(cls, json_str: str | bytes) -> "Event":
        """
        Deserialize event from JSON string.

        Raises:
            ValueError: Malformed JSON or envelope (json.JSONDecodeError is a ValueError).
        """
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ValueError("Event envelope must be a JSON object")
        return cls(
            event=data.get("event", ""),
            payload=data.get("payload"),
            ts=data.get("ts"),
        )
