"""
Order status derivation.

The order status is never set from item changes directly; it is computed
from the order's current status and its items' kitchen statuses.

Rules, in precedence order:
1. served / cancelled are terminal and returned unchanged.
2. Every item ready -> ready.
3. Any item preparing while the order is still pending -> preparing.
4. Otherwise the current status is kept.

The result only ever moves forward along pending -> preparing -> ready.
"""

from collections.abc import Iterable

from shared.config.constants import OrderStatus, OrderItemStatus


def derive_order_status(current_status: str, item_statuses: Iterable[str]) -> str:
    """Compute the order status implied by its items. Pure function."""
    if current_status in OrderStatus.TERMINAL:
        return current_status

    statuses = list(item_statuses)

    if statuses and all(s == OrderItemStatus.READY for s in statuses):
        return OrderStatus.READY

    if current_status == OrderStatus.PENDING and any(
        s == OrderItemStatus.PREPARING for s in statuses
    ):
        return OrderStatus.PREPARING

    return current_status
