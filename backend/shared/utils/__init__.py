"""
Utilities module: Exceptions, schemas.
"""

from shared.utils.exceptions import (
    NotFoundError,
    ValidationError,
    ConflictError,
    InvalidOrderError,
    TerminalStateError,
)
from shared.utils.order_schemas import CartItemInput, OrderContext, OrderOutput

__all__ = [
    # exceptions
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "InvalidOrderError",
    "TerminalStateError",
    # schemas
    "CartItemInput",
    "OrderContext",
    "OrderOutput",
]
