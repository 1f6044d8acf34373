"""
Tests for the broadcast envelope and publishers.
"""

import json
from unittest.mock import MagicMock

import pytest
import redis

from shared.infrastructure.events import (
    ORDER_CREATED,
    ORDER_DELETED,
    ORDER_STATUS_CHANGED,
    PRODUCT_CREATED,
    PRODUCT_DELETED,
    Event,
    LoggingEventPublisher,
    RedisEventPublisher,
    build_event,
    wire_name,
)
from shared.infrastructure.events.event_types import MAX_EVENT_SIZE


class TestWireNames:

    @pytest.mark.parametrize(
        "event_name,expected",
        [
            (ORDER_CREATED, "orders@new"),
            (ORDER_STATUS_CHANGED, "order@checked"),
            (ORDER_DELETED, "order@deleted"),
            (PRODUCT_CREATED, "products@new"),
            (PRODUCT_DELETED, "products@deleted"),
        ],
    )
    def test_domain_names_map_to_wire_names(self, event_name, expected):
        assert wire_name(event_name) == expected

    def test_wire_names_pass_through(self):
        assert wire_name("orders@new") == "orders@new"

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            wire_name("order.exploded")


class TestEvent:

    def test_timestamp_is_filled_in(self):
        event = Event(event="orders@new", payload={"id": 1})
        assert event.ts

    def test_rejects_unknown_event(self):
        with pytest.raises(ValueError):
            Event(event="kitchen@ready")

    def test_from_json(self):
        event = Event.from_json('{"event": "order@deleted", "payload": {"id": 3}, "ts": "now"}')
        assert event.event == "order@deleted"
        assert event.payload == {"id": 3}
        assert event.ts == "now"

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"payload": {}}'])
    def test_from_json_rejects_malformed(self, raw):
        with pytest.raises(ValueError):
            Event.from_json(raw)


class TestBuildEvent:

    def test_builds_envelope(self):
        event = build_event(PRODUCT_DELETED, {"id": 9})
        assert event.to_dict()["event"] == "products@deleted"
        assert event.to_dict()["payload"] == {"id": 9}

    def test_drops_unknown_event(self):
        assert build_event("order.exploded", {}) is None

    def test_drops_oversized_event(self):
        assert build_event(ORDER_CREATED, {"blob": "x" * MAX_EVENT_SIZE}) is None


class TestRedisEventPublisher:

    def test_publishes_envelope_on_channel(self):
        client = MagicMock()
        client.publish.return_value = 2
        publisher = RedisEventPublisher(channel="comanda:test", client=client)

        publisher.publish(ORDER_DELETED, {"id": 4})

        channel, message = client.publish.call_args.args
        assert channel == "comanda:test"
        envelope = json.loads(message)
        assert envelope["event"] == "order@deleted"
        assert envelope["payload"] == {"id": 4}
        assert envelope["ts"]

    def test_redis_failure_is_swallowed(self):
        client = MagicMock()
        client.publish.side_effect = redis.ConnectionError("down")
        publisher = RedisEventPublisher(channel="comanda:test", client=client)

        publisher.publish(ORDER_CREATED, {"id": 1})

        client.publish.assert_called_once()

    def test_invalid_event_is_not_sent(self):
        client = MagicMock()
        publisher = RedisEventPublisher(channel="comanda:test", client=client)

        publisher.publish("order.exploded", {"id": 1})

        client.publish.assert_not_called()


class TestLoggingEventPublisher:

    def test_publish_never_raises(self):
        publisher = LoggingEventPublisher()
        publisher.publish(ORDER_CREATED, {"id": 1})
        publisher.publish("order.exploded", {"id": 1})
        publisher.close()
