"""
Event Type Constants.

Domain event names used by the services, and the wire names the
real-time clients listen for.
"""

from shared.config.settings import settings

# =============================================================================
# Order lifecycle events
# =============================================================================

ORDER_CREATED = "order.created"
ORDER_STATUS_CHANGED = "order.statusChanged"
ORDER_DELETED = "order.deleted"

# =============================================================================
# Catalog events
# =============================================================================

PRODUCT_CREATED = "product.created"
PRODUCT_DELETED = "product.deleted"

# =============================================================================
# Wire names
# =============================================================================

# Names emitted on the WebSocket; the clients subscribe to these strings
WIRE_NAMES: dict[str, str] = {
    ORDER_CREATED: "orders@new",
    ORDER_STATUS_CHANGED: "order@checked",
    ORDER_DELETED: "order@deleted",
    PRODUCT_CREATED: "products@new",
    PRODUCT_DELETED: "products@deleted",
}

ALL_WIRE_NAMES: frozenset[str] = frozenset(WIRE_NAMES.values())


def wire_name(event_name: str) -> str:
    """
    Translate a domain event name to its wire name.

    Names that are already wire names pass through unchanged.

    Raises:
        ValueError: Unknown event name.
    """
    if event_name in WIRE_NAMES:
        return WIRE_NAMES[event_name]
    if event_name in ALL_WIRE_NAMES:
        return event_name
    raise ValueError(f"Unknown event name: {event_name}")


# =============================================================================
# Size limits
# =============================================================================

# Envelopes larger than this are dropped instead of published
MAX_EVENT_SIZE = settings.max_event_size
