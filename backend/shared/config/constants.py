"""
Centralized constants for the order core.
Avoid magic strings for order and item statuses.

Usage:
    from shared.config.constants import OrderStatus, OrderItemStatus

    if order.status in OrderStatus.TERMINAL:
        ...

    if item.status == OrderItemStatus.READY:
        ...
"""

from typing import Final


# =============================================================================
# Entity Status Constants
# =============================================================================


class OrderStatus:
    """Order status constants."""

    PENDING: Final[str] = "pending"
    PREPARING: Final[str] = "preparing"
    READY: Final[str] = "ready"
    SERVED: Final[str] = "served"
    CANCELLED: Final[str] = "cancelled"

    ALL: Final[list[str]] = [PENDING, PREPARING, READY, SERVED, CANCELLED]

    # Status groups
    ACTIVE: Final[list[str]] = [PENDING, PREPARING]  # Still needs kitchen attention
    BOARD: Final[list[str]] = [PENDING, PREPARING, READY]  # Shown on the status screen
    TERMINAL: Final[list[str]] = [SERVED, CANCELLED]  # No transitions out


class OrderItemStatus:
    """Kitchen display status of a single order item."""

    PENDING: Final[str] = "pending"
    PREPARING: Final[str] = "preparing"
    READY: Final[str] = "ready"

    ALL: Final[list[str]] = [PENDING, PREPARING, READY]


# =============================================================================
# Status Progression
# =============================================================================

# Items only move forward: pending -> preparing -> ready
ITEM_STATUS_RANK: Final[dict[str, int]] = {
    OrderItemStatus.PENDING: 0,
    OrderItemStatus.PREPARING: 1,
    OrderItemStatus.READY: 2,
}

# Ordering of the status board bands
BOARD_STATUS_RANK: Final[dict[str, int]] = {
    OrderStatus.PENDING: 0,
    OrderStatus.PREPARING: 1,
    OrderStatus.READY: 2,
}


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    MIN_QUANTITY: Final[int] = 1
    MIN_ITEMS_PER_ORDER: Final[int] = 1


def validate_order_status(status: str) -> bool:
    """Check if status is a valid order status."""
    return status in OrderStatus.ALL


def validate_item_status(status: str) -> bool:
    """Check if status is a valid order item status."""
    return status in OrderItemStatus.ALL
