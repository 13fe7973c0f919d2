"""
Order lifecycle core.

Order Store plus the pure status derivation engine it runs on every
item-status change.
"""

from order_core.derivation import derive_order_status
from order_core.events import EventType, OrderEvent, OrderEventPublisher
from order_core.locks import OrderLockManager
from order_core.models import Order, OrderItem
from order_core.store import OrderStore

__all__ = [
    "derive_order_status",
    "EventType",
    "OrderEvent",
    "OrderEventPublisher",
    "OrderLockManager",
    "Order",
    "OrderItem",
    "OrderStore",
]
