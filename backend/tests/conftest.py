"""
Pytest configuration and fixtures for order core tests.
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from order_core import OrderStore, OrderEvent
from shared.config.settings import Settings


class FakeClock:
    """Deterministic clock. Advances one second per call unless frozen."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def test_settings():
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        environment="test",
        debug=False,
        order_id_prefix="order",
        order_id_max_attempts=5,
        order_number_prefix="ORD",
        order_number_width=3,
        status_board_limit=None,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def frozen_clock():
    """Clock that never moves, to exercise timestamp bumping."""
    return FakeClock(step=timedelta(0))


@pytest.fixture
def store(test_settings, clock):
    """Empty order store with a deterministic clock."""
    return OrderStore(settings=test_settings, clock=clock)


@pytest.fixture
def published_events(store):
    """Collect every event the store publishes."""
    events: list[OrderEvent] = []
    store.subscribe(events.append)
    return events


@pytest.fixture
def cart():
    """Two-line cart: 1 x 10 and 2 x 5 (total 20)."""
    return [
        {"menu_item_id": "pizza", "quantity": 1, "unit_price": Decimal("10")},
        {"menu_item_id": "soda", "quantity": 2, "unit_price": Decimal("5"), "notes": "no ice"},
    ]


@pytest.fixture
def two_item_order(store, cart):
    """Order created from the two-line cart at table T1."""
    return store.create(cart, {"table_id": "T1", "branch_id": "1"})
