"""
Order value objects: Order, OrderItem.

Both are immutable. The store replaces an Order with a new value on every
mutation, so any Order a caller holds is a consistent snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal

from shared.config.constants import OrderStatus, OrderItemStatus


@dataclass(frozen=True, slots=True)
class OrderItem:
    """
    A single line within an order.
    Stores the price at the time of order for historical accuracy.
    """

    id: str
    menu_item_id: str | int
    quantity: int
    unit_price: Decimal
    notes: str | None = None
    status: str = OrderItemStatus.PENDING

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def with_status(self, status: str) -> OrderItem:
        return replace(self, status=status)


@dataclass(frozen=True, slots=True)
class Order:
    """
    A customer's submitted set of items tracked through preparation and service.

    Attributes:
        id: Globally unique identifier, assigned at creation
        order_number: Sequential number, never reused within the store
        label: Human-facing rendering of order_number (e.g. "ORD-007")
        items: Line items, fixed in membership after creation
        status: Aggregate status, derived from items for pending/preparing/ready
        total_amount: Sum of item subtotals, computed at creation
        table_id / branch_id: Opaque context identifiers
        created_at / updated_at: Creation and last mutation time
    """

    id: str
    order_number: int
    label: str
    items: tuple[OrderItem, ...]
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime
    status: str = OrderStatus.PENDING
    table_id: str | int | None = None
    branch_id: str | int | None = None
    # Lookup by item id; not part of equality or repr
    _items_by_id: dict[str, OrderItem] = field(
        init=False, repr=False, compare=False, hash=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_items_by_id", {item.id: item for item in self.items})

    @property
    def is_terminal(self) -> bool:
        return self.status in OrderStatus.TERMINAL

    @property
    def is_active(self) -> bool:
        return self.status in OrderStatus.ACTIVE

    @property
    def item_statuses(self) -> list[str]:
        return [item.status for item in self.items]

    def get_item(self, item_id: str) -> OrderItem | None:
        return self._items_by_id.get(item_id)

    def with_item_status(self, item_id: str, status: str) -> tuple[OrderItem, ...]:
        """Return the items with the matching item's status replaced."""
        return tuple(
            item.with_status(status) if item.id == item_id else item
            for item in self.items
        )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, label={self.label}, status='{self.status}', items={len(self.items)})>"
