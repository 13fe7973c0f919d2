from datetime import datetime
from decimal import Decimal
from typing import Literal, List
from pydantic import BaseModel, Field

OrderStatusType = Literal["pending", "preparing", "ready", "served", "cancelled"]
OrderItemStatusType = Literal["pending", "preparing", "ready"]


class CartItemInput(BaseModel):
    """A single cart line submitted for ordering."""
    menu_item_id: str | int
    quantity: int = Field(ge=1, strict=True, description="Number of units ordered")
    notes: str | None = None
    unit_price: Decimal = Field(ge=0, description="Price per unit at the time of ordering")


class OrderContext(BaseModel):
    """Opaque table/branch identifiers carried on the order."""
    table_id: str | int | None = None
    branch_id: str | int | None = None


class OrderItemOutput(BaseModel):
    """Output for a single item in an order."""
    id: str
    menu_item_id: str | int
    quantity: int
    notes: str | None = None
    unit_price: Decimal
    subtotal: Decimal
    status: OrderItemStatusType

    class Config:
        from_attributes = True


class OrderOutput(BaseModel):
    """Output for an order with its items."""
    id: str
    order_number: int
    label: str
    status: OrderStatusType
    total_amount: Decimal
    table_id: str | int | None = None
    branch_id: str | int | None = None
    items: List[OrderItemOutput]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @classmethod
    def from_order(cls, order) -> "OrderOutput":
        return cls.model_validate(order)

