"""
Tests for the centralized exceptions.

Each error must carry the HTTP status an adapter would return and log
itself with its context.
"""

import logging

import pytest
from fastapi import HTTPException

from shared.utils.exceptions import (
    AppException,
    ConflictError,
    InternalError,
    InvalidOrderError,
    InvalidStatusError,
    InvalidTransitionError,
    NotFoundError,
    OrderItemNotFoundError,
    OrderNotFoundError,
    TerminalStateError,
    ValidationError,
)


class TestStatusCodes:
    """Errors map to HTTP statuses."""

    @pytest.mark.parametrize(
        "error, status_code, base",
        [
            (OrderNotFoundError("order-1"), 404, NotFoundError),
            (OrderItemNotFoundError("order-1", "item-3"), 404, NotFoundError),
            (InvalidOrderError("Order must contain at least one item"), 400, ValidationError),
            (InvalidStatusError("order", "lost", ["pending"]), 400, ValidationError),
            (InvalidTransitionError("order item", "ready", "pending"), 400, ValidationError),
            (TerminalStateError("order-1", "served"), 409, ConflictError),
            (InternalError(), 500, AppException),
        ],
    )
    def test_status_code_and_hierarchy(self, error, status_code, base):
        assert error.status_code == status_code
        assert isinstance(error, base)
        assert isinstance(error, HTTPException)


class TestMessages:
    """Error details are readable."""

    def test_not_found_detail_includes_id(self):
        assert OrderNotFoundError("order-1").detail == "Order with ID order-1 not found"

    def test_not_found_without_id(self):
        assert NotFoundError("Order").detail == "Order not found"

    def test_item_not_found_detail(self):
        assert OrderItemNotFoundError("order-1", "item-3").detail == "Order item with ID item-3 not found"

    def test_invalid_status_lists_allowed_values(self):
        error = InvalidStatusError("order item", "served", ["pending", "preparing", "ready"])
        assert error.detail == (
            "Invalid order item status 'served', expected one of: pending, preparing, ready"
        )

    def test_terminal_state_keeps_context(self):
        error = TerminalStateError("order-1", "cancelled")
        assert error.order_id == "order-1"
        assert error.current_status == "cancelled"
        assert "cancelled" in error.detail


class TestLogging:
    """Errors log themselves on construction."""

    def test_warning_logged_with_context(self, caplog):
        with caplog.at_level(logging.WARNING, logger="shared.utils.exceptions"):
            OrderNotFoundError("order-7")

        record = caplog.records[-1]
        assert record.levelname == "WARNING"
        assert record.getMessage() == "Order with ID order-7 not found"
        assert record.extra_data["status_code"] == 404
        assert record.extra_data["entity_id"] == "order-7"

    def test_internal_error_logged_as_error(self, caplog):
        with caplog.at_level(logging.WARNING, logger="shared.utils.exceptions"):
            InternalError("boom", attempts=3)

        record = caplog.records[-1]
        assert record.levelname == "ERROR"
        assert record.extra_data["attempts"] == 3
