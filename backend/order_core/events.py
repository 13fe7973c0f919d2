"""
Order events and their in-process publisher.

Events are published after a mutation has been committed to the store and
all locks are released. Subscribers are the adapters that persist orders or
notify kitchen displays; the store itself performs no I/O.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class EventType(str, Enum):
    """Event type enumeration for type safety."""

    ORDER_CREATED = "ORDER_CREATED"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"
    ITEM_STATUS_CHANGED = "ITEM_STATUS_CHANGED"


@dataclass(frozen=True, slots=True)
class OrderEvent:
    """
    Immutable order event.

    Attributes:
        event_type: Type of event (from EventType enum)
        order_id: ID of the order
        order_number: Sequential number of the order
        status: Order status (or item status for ITEM_STATUS_CHANGED) after the change
        previous_status: Status before the change, None on creation
        item_id: Item that changed, only for ITEM_STATUS_CHANGED
        branch_id / table_id: Context identifiers carried by the order
        timestamp: When the change was committed
    """

    event_type: EventType
    order_id: str
    order_number: int
    status: str
    previous_status: str | None = None
    item_id: str | None = None
    branch_id: str | int | None = None
    table_id: str | int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.event_type.value,
            "order_id": self.order_id,
            "order_number": self.order_number,
            "status": self.status,
            "previous_status": self.previous_status,
            "item_id": self.item_id,
            "branch_id": self.branch_id,
            "table_id": self.table_id,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderEvent":
        """Create from dictionary."""
        event_type = data.get("type") or data.get("event_type")
        if isinstance(event_type, str):
            event_type = EventType(event_type)

        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        elif timestamp is None:
            timestamp = datetime.now(timezone.utc)

        return cls(
            event_type=event_type,
            order_id=data["order_id"],
            order_number=data["order_number"],
            status=data["status"],
            previous_status=data.get("previous_status"),
            item_id=data.get("item_id"),
            branch_id=data.get("branch_id"),
            table_id=data.get("table_id"),
            timestamp=timestamp,
        )


OrderEventListener = Callable[[OrderEvent], None]


class OrderEventPublisher:
    """
    Publisher for order events.

    Delivers each event to every subscriber in registration order.
    A failing subscriber is logged and skipped; it never undoes the
    mutation that produced the event.

    Usage:
        publisher = OrderEventPublisher()
        unsubscribe = publisher.subscribe(lambda event: print(event.to_json()))
        publisher.publish(event)
        unsubscribe()
    """

    def __init__(self) -> None:
        self._listeners: list[OrderEventListener] = []
        self._lock = threading.Lock()

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def subscribe(self, listener: OrderEventListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: OrderEvent) -> int:
        """
        Publish an event to all listeners.

        Args:
            event: Order event to publish

        Returns:
            Number of listeners that handled the event without error
        """
        with self._lock:
            listeners = list(self._listeners)

        delivered = 0
        for listener in listeners:
            try:
                listener(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    "Failed to deliver order event",
                    event_type=event.event_type.value,
                    order_id=event.order_id,
                    error=str(e),
                    exc_info=True,
                )

        logger.debug(
            "Order event published",
            event_type=event.event_type.value,
            order_id=event.order_id,
            delivered=delivered,
        )
        return delivered

    def publish_multiple(self, events: list[OrderEvent]) -> int:
        """Publish events in order. Returns total successful deliveries."""
        return sum(self.publish(event) for event in events)
