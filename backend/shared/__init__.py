"""
Shared module for common utilities of the order core.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Order and item statuses, limits

- shared.utils: Utilities
  - exceptions.py: HTTP-mappable exceptions with auto-logging
  - order_schemas.py: Pydantic schemas for cart input and order output

IMPORT EXAMPLES:
    from shared.config.settings import settings
    from shared.config.constants import OrderStatus, OrderItemStatus
    from shared.utils.exceptions import NotFoundError, TerminalStateError
    from shared.utils.order_schemas import CartItemInput, OrderOutput
"""
