"""
Order Store: authoritative in-memory collection of orders.

Owns order creation, status mutation, item-status mutation and the
read queries used by kitchen displays and dashboards.

Concurrency:
- Mutations of one order are serialized by that order's lock.
- Id and order number assignment run under the store-wide creation lock.
- Reads never lock: they take the current immutable id sequence and the
  immutable Order values it points to.
- Events are published after every lock has been released.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from order_core.derivation import derive_order_status
from order_core.events import EventType, OrderEvent, OrderEventListener, OrderEventPublisher
from order_core.locks import OrderLockManager
from order_core.models import Order, OrderItem
from shared.config.constants import (
    BOARD_STATUS_RANK,
    ITEM_STATUS_RANK,
    Limits,
    OrderItemStatus,
    OrderStatus,
    validate_item_status,
    validate_order_status,
)
from shared.config.logging import kitchen_logger as logger
from shared.config.settings import Settings, get_settings
from shared.utils.exceptions import (
    InternalError,
    InvalidOrderError,
    InvalidStatusError,
    InvalidTransitionError,
    OrderItemNotFoundError,
    OrderNotFoundError,
    TerminalStateError,
    ValidationError,
)
from shared.utils.order_schemas import CartItemInput, OrderContext

Clock = Callable[[], datetime]
Mutation = Callable[[Order], tuple[Order, list[OrderEvent]]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStore:
    """
    In-memory order store.

    Usage:
        store = OrderStore()
        order = store.create(
            [{"menu_item_id": "burger", "quantity": 2, "unit_price": "8.50"}],
            {"table_id": "T1", "branch_id": "1"},
        )
        store.set_item_status(order.id, order.items[0].id, "preparing")
        store.active_orders()
    """

    def __init__(
        self,
        orders: Iterable[Order] = (),
        *,
        settings: Settings | None = None,
        clock: Clock | None = None,
        publisher: OrderEventPublisher | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        """
        Args:
            orders: Known orders, most-recent-first. Seeds the order number counter.
            settings: Settings to use instead of the cached application settings.
            clock: Returns the current aware datetime.
            publisher: Event publisher shared with adapters.
            id_factory: Produces candidate order ids; uniqueness is still checked.
        """
        self._settings = settings or get_settings()
        self._clock = clock or _utcnow
        self._publisher = publisher or OrderEventPublisher()
        self._id_factory = id_factory or self._default_order_id
        self._locks = OrderLockManager()

        initial = list(orders)
        self._orders: dict[str, Order] = {}
        for order in initial:
            self._validate_seed_order(order)
            if order.id in self._orders:
                raise ValidationError(f"Duplicate order id {order.id} in initial orders", order_id=order.id)
            self._orders[order.id] = order

        numbers = [order.order_number for order in initial]
        if len(set(numbers)) != len(numbers):
            raise ValidationError("Duplicate order numbers in initial orders")

        # Most-recent-first. Replaced, never mutated, so readers can hold it.
        self._sequence: tuple[str, ...] = tuple(order.id for order in initial)
        self._order_counter = max(len(initial), max(numbers, default=0))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def publisher(self) -> OrderEventPublisher:
        return self._publisher

    @property
    def lock_manager(self) -> OrderLockManager:
        return self._locks

    @property
    def last_order_number(self) -> int:
        """Most recently assigned order number (or the seed value)."""
        return self._order_counter

    def __len__(self) -> int:
        return len(self._sequence)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._orders

    # =========================================================================
    # Creation
    # =========================================================================

    def create(
        self,
        cart_items: Iterable[CartItemInput | Mapping[str, Any]],
        context: OrderContext | Mapping[str, Any] | None = None,
    ) -> Order:
        """
        Create an order from cart items.

        Every item and the order start as pending. The new order is placed at
        the front of the store's ordering.

        Raises:
            InvalidOrderError: Empty cart, non-positive quantity or malformed entry.
        """
        lines = self._parse_cart(cart_items)
        ctx = self._parse_context(context)

        items = tuple(
            OrderItem(
                id=f"item-{position}",
                menu_item_id=line.menu_item_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                notes=line.notes,
            )
            for position, line in enumerate(lines, start=1)
        )
        total_amount = sum((item.subtotal for item in items), Decimal("0"))

        with self._locks.creation_lock:
            order_id = self._generate_order_id()
            self._order_counter += 1
            order_number = self._order_counter
            now = self._clock()
            order = Order(
                id=order_id,
                order_number=order_number,
                label=self._settings.format_order_number(order_number),
                items=items,
                total_amount=total_amount,
                created_at=now,
                updated_at=now,
                table_id=ctx.table_id,
                branch_id=ctx.branch_id,
            )
            self._orders[order_id] = order
            self._sequence = (order_id,) + self._sequence

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            items=len(order.items),
            total_amount=str(order.total_amount),
            table_id=order.table_id,
            branch_id=order.branch_id,
        )
        self._publisher.publish(self._event(EventType.ORDER_CREATED, order))
        return order

    # =========================================================================
    # Mutations
    # =========================================================================

    def set_order_status(self, order_id: str, new_status: str) -> Order:
        """
        Explicitly set an order's status.

        This is the only way to reach served or cancelled. Overrides of
        pending/preparing/ready are applied as given, without re-deriving
        from the items.

        Raises:
            InvalidStatusError: new_status is not an order status.
            OrderNotFoundError: Unknown order.
            TerminalStateError: Order is served or cancelled.
        """
        if not validate_order_status(new_status):
            raise InvalidStatusError("order", new_status, OrderStatus.ALL, order_id=order_id)

        def apply(order: Order) -> tuple[Order, list[OrderEvent]]:
            updated = replace(
                order,
                status=new_status,
                updated_at=self._next_timestamp(order.updated_at),
            )
            event = self._event(EventType.ORDER_STATUS_CHANGED, updated, previous_status=order.status)
            return updated, [event]

        updated = self._mutate(order_id, apply)
        logger.info("Order status set", order_id=order_id, status=new_status)
        return updated

    def set_item_status(self, order_id: str, item_id: str, new_status: str) -> Order:
        """
        Move one item through the kitchen flow and re-derive the order status.

        updated_at advances even when the order status does not change.

        Raises, checked in this order:
            InvalidStatusError: new_status is not an item status.
            OrderNotFoundError / OrderItemNotFoundError: Unknown order or item.
            TerminalStateError: Order is served or cancelled.
            InvalidTransitionError: The item would move backwards.
        """
        if not validate_item_status(new_status):
            raise InvalidStatusError(
                "order item", new_status, OrderItemStatus.ALL, order_id=order_id, item_id=item_id
            )
        # Item membership never changes, so the lookup is safe outside the lock
        if self.get(order_id).get_item(item_id) is None:
            raise OrderItemNotFoundError(order_id, item_id)

        def apply(order: Order) -> tuple[Order, list[OrderEvent]]:
            item = order.get_item(item_id)
            if ITEM_STATUS_RANK[new_status] < ITEM_STATUS_RANK[item.status]:
                raise InvalidTransitionError(
                    "order item", item.status, new_status, order_id=order_id, item_id=item_id
                )

            items = order.with_item_status(item_id, new_status)
            derived = derive_order_status(order.status, [i.status for i in items])
            updated = replace(
                order,
                items=items,
                status=derived,
                updated_at=self._next_timestamp(order.updated_at),
            )

            events = [
                self._event(
                    EventType.ITEM_STATUS_CHANGED,
                    updated,
                    status=new_status,
                    previous_status=item.status,
                    item_id=item_id,
                )
            ]
            if derived != order.status:
                events.append(
                    self._event(EventType.ORDER_STATUS_CHANGED, updated, previous_status=order.status)
                )
            return updated, events

        updated = self._mutate(order_id, apply)
        logger.info(
            "Order item status set",
            order_id=order_id,
            item_id=item_id,
            item_status=new_status,
            order_status=updated.status,
        )
        return updated

    def mark_ready(self, order_id: str) -> Order:
        """
        Mark every item and the order itself as ready in one mutation.

        Raises:
            OrderNotFoundError: Unknown order.
            TerminalStateError: Order is served or cancelled.
        """

        def apply(order: Order) -> tuple[Order, list[OrderEvent]]:
            updated = replace(
                order,
                items=tuple(item.with_status(OrderItemStatus.READY) for item in order.items),
                status=OrderStatus.READY,
                updated_at=self._next_timestamp(order.updated_at),
            )
            event = self._event(EventType.ORDER_STATUS_CHANGED, updated, previous_status=order.status)
            return updated, [event]

        updated = self._mutate(order_id, apply)
        logger.info("Order marked ready", order_id=order_id)
        return updated

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def all_orders(self) -> list[Order]:
        """Full history, most-recent-first."""
        return self._snapshot()

    def active_orders(self) -> list[Order]:
        """Orders still needing kitchen attention (pending or preparing), most-recent-first."""
        return [order for order in self._snapshot() if order.is_active]

    def orders_with_status(self, *statuses: str) -> list[Order]:
        """Orders in any of the given statuses, most-recent-first."""
        for status in statuses:
            if not validate_order_status(status):
                raise InvalidStatusError("order", status, OrderStatus.ALL)
        wanted = set(statuses)
        return [order for order in self._snapshot() if order.status in wanted]

    def status_board(self, limit: int | None = None) -> list[Order]:
        """
        Orders for the customer-facing status screen.

        Non-terminal orders grouped pending, preparing, ready; oldest first
        within each group.
        """
        if limit is None:
            limit = self._settings.status_board_limit
        board = sorted(
            (order for order in self._snapshot() if order.status in OrderStatus.BOARD),
            key=lambda order: (BOARD_STATUS_RANK[order.status], order.created_at),
        )
        if limit is not None:
            board = board[:limit]
        logger.debug("Status board built", orders=len(board), limit=limit)
        return board

    def subscribe(self, listener: OrderEventListener) -> Callable[[], None]:
        """Register an event listener. Returns a callable that removes it."""
        return self._publisher.subscribe(listener)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _validate_seed_order(self, order: Order) -> None:
        """Reject a known order that breaks the invariants created orders keep."""
        if not order.items:
            raise ValidationError(f"Order {order.id} has no items", order_id=order.id)
        if order.status not in OrderStatus.ALL:
            raise InvalidStatusError("order", order.status, OrderStatus.ALL, order_id=order.id)
        for item in order.items:
            if item.status not in OrderItemStatus.ALL:
                raise InvalidStatusError(
                    "order item", item.status, OrderItemStatus.ALL, order_id=order.id, item_id=item.id
                )
        if order.created_at.tzinfo is None or order.updated_at.tzinfo is None:
            raise ValidationError(f"Order {order.id} has naive timestamps", order_id=order.id)
        if order.updated_at < order.created_at:
            raise ValidationError(f"Order {order.id} was updated before it was created", order_id=order.id)

    def _snapshot(self) -> list[Order]:
        sequence = self._sequence
        orders = self._orders
        return [orders[order_id] for order_id in sequence]

    def _mutate(self, order_id: str, apply: Mutation) -> Order:
        """
        Run a mutation under the order's lock and publish its events afterwards.

        apply receives the current order and returns the replacement and the
        events to publish. If it raises, the order is left untouched.
        """
        if order_id not in self._orders:
            raise OrderNotFoundError(order_id)

        with self._locks.get_order_lock(order_id):
            current = self._orders[order_id]
            if current.is_terminal:
                raise TerminalStateError(order_id, current.status)
            updated, events = apply(current)
            self._orders[order_id] = updated

        if updated.is_terminal:
            self._locks.discard(order_id)
        self._publisher.publish_multiple(events)
        return updated

    def _parse_cart(self, cart_items: Iterable[CartItemInput | Mapping[str, Any]] | None) -> list[CartItemInput]:
        if cart_items is None or isinstance(cart_items, (str, bytes, Mapping)):
            raise InvalidOrderError("Cart items must be a sequence of items")

        lines = []
        for position, raw in enumerate(cart_items, start=1):
            if isinstance(raw, CartItemInput):
                line = raw
            else:
                try:
                    line = CartItemInput.model_validate(raw)
                except PydanticValidationError as e:
                    error = e.errors()[0]
                    field_name = ".".join(str(part) for part in error["loc"]) or "item"
                    raise InvalidOrderError(
                        f"Invalid cart item at position {position}: {field_name}: {error['msg']}",
                        position=position,
                    ) from e

            if line.quantity < Limits.MIN_QUANTITY:
                raise InvalidOrderError(
                    f"Quantity must be at least {Limits.MIN_QUANTITY} (item at position {position})",
                    position=position,
                    quantity=line.quantity,
                )
            lines.append(line)

        if len(lines) < Limits.MIN_ITEMS_PER_ORDER:
            raise InvalidOrderError("Order must contain at least one item")
        return lines

    def _parse_context(self, context: OrderContext | Mapping[str, Any] | None) -> OrderContext:
        if context is None:
            return OrderContext()
        if isinstance(context, OrderContext):
            return context
        try:
            return OrderContext.model_validate(context)
        except PydanticValidationError as e:
            raise InvalidOrderError(f"Invalid order context: {e.errors()[0]['msg']}") from e

    def _default_order_id(self) -> str:
        return f"{self._settings.order_id_prefix}-{uuid.uuid4().hex}"

    def _generate_order_id(self) -> str:
        """Pick an id not used by any known order. Caller holds the creation lock."""
        attempts = self._settings.order_id_max_attempts
        for _ in range(attempts):
            candidate = self._id_factory()
            if candidate not in self._orders:
                return candidate
            logger.warning("Order id collision", order_id=candidate)
        raise InternalError("Could not allocate a unique order id", attempts=attempts)

    def _next_timestamp(self, previous: datetime) -> datetime:
        """Current time, forced strictly past the previous timestamp."""
        now = self._clock()
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    def _event(
        self,
        event_type: EventType,
        order: Order,
        *,
        status: str | None = None,
        previous_status: str | None = None,
        item_id: str | None = None,
    ) -> OrderEvent:
        return OrderEvent(
            event_type=event_type,
            order_id=order.id,
            order_number=order.order_number,
            status=status or order.status,
            previous_status=previous_status,
            item_id=item_id,
            branch_id=order.branch_id,
            table_id=order.table_id,
            timestamp=order.updated_at,
        )
