"""
Centralized exceptions for the order core.
Every error maps to an HTTP status so adapters can surface it unchanged.

Usage:
    from shared.utils.exceptions import NotFoundError, TerminalStateError, InvalidOrderError

    raise OrderNotFoundError(order_id)
    raise TerminalStateError(order_id, "served")
    raise InvalidOrderError("Order must contain at least one item")
"""

from fastapi import HTTPException, status
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        # Log the error with context
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Order", order_id)
        raise NotFoundError("Order item", item_id, order_id=order_id)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class OrderNotFoundError(NotFoundError):
    """Order not found."""

    def __init__(self, order_id: str | None = None, **log_context: Any):
        super().__init__("Order", order_id, **log_context)


class OrderItemNotFoundError(NotFoundError):
    """Item not found within its order."""

    def __init__(self, order_id: str, item_id: str, **log_context: Any):
        super().__init__("Order item", item_id, order_id=order_id, **log_context)


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Quantity must be positive", field="quantity", value=-1)
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidOrderError(ValidationError):
    """Submitted cart cannot become an order (empty, bad quantity, malformed)."""


class InvalidStatusError(ValidationError):
    """Status value is not one of the allowed statuses."""

    def __init__(self, entity: str, value: str, allowed: list[str], **log_context: Any):
        allowed_str = ", ".join(allowed)
        detail = f"Invalid {entity} status '{value}', expected one of: {allowed_str}"
        super().__init__(detail, entity=entity, value=value, **log_context)


class InvalidTransitionError(ValidationError):
    """Invalid status transition."""

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        detail = f"Invalid transition from '{from_status}' to '{to_status}' for {entity}"
        super().__init__(detail, entity=entity, from_status=from_status, to_status=to_status, **log_context)


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Order was already served")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class TerminalStateError(ConflictError):
    """Mutation attempted on a served or cancelled order."""

    def __init__(self, order_id: str, current_status: str, **log_context: Any):
        self.order_id = order_id
        self.current_status = current_status
        super().__init__(
            f"Order {order_id} is {current_status} and can no longer change",
            order_id=order_id,
            current_status=current_status,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal error (500).

    Usage:
        raise InternalError("Could not allocate a unique order id", attempts=5)
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )
