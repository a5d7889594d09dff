# eats/schemas/order.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from eats.models.order import Order, OrderItem, OrderStatus
from eats.schemas.common import CamelModel, CoreOutput


class OrderItemOption(CamelModel):
    name: str = Field(..., min_length=1)
    choice: Optional[str] = None


class CreateOrderItemInput(CamelModel):
    dish_id: int
    options: List[OrderItemOption] = Field(default_factory=list)


class CreateOrderInput(CamelModel):
    """Schema for placing an order."""

    restaurant_id: int
    items: List[CreateOrderItemInput] = Field(..., min_length=1)


class CreateOrderOutput(CoreOutput):
    order_id: Optional[int] = None


class OrderItemSchema(CamelModel):
    id: int
    dish_id: Optional[int] = None
    options: List[OrderItemOption] = Field(default_factory=list)

    @classmethod
    def from_orm_item(cls, item: OrderItem) -> "OrderItemSchema":
        return cls(
            id=item.id,
            dish_id=item.dish_id,
            options=[OrderItemOption.model_validate(option) for option in item.options or []]
        )


class OrderSchema(CamelModel):
    """Schema for order responses and order events."""

    id: int
    customer_id: Optional[int] = None
    driver_id: Optional[int] = None
    restaurant_id: Optional[int] = None
    total: Optional[Decimal] = None
    status: OrderStatus
    items: Optional[List[OrderItemSchema]] = None
    created_at: datetime

    @classmethod
    def from_orm_order(cls, order: Order, include_items: bool = False) -> "OrderSchema":
        """
        Create response schema from ORM model.

        Args:
            order: Order ORM model
            include_items: Whether to serialize the (already fetched) items

        Returns:
            OrderSchema instance
        """
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            driver_id=order.driver_id,
            restaurant_id=order.restaurant_id,
            total=order.total,
            status=order.status,
            items=[OrderItemSchema.from_orm_item(item) for item in order.items] if include_items else None,
            created_at=order.created_at
        )


class GetOrdersOutput(CoreOutput):
    orders: Optional[List[OrderSchema]] = None


class GetOrderOutput(CoreOutput):
    order: Optional[OrderSchema] = None


class EditOrderInput(CamelModel):
    order_id: int
    status: OrderStatus


class EditOrderOutput(CoreOutput):
    pass


class TakeOrderOutput(CoreOutput):
    pass


# ----- Events -----

class PendingOrderEvent(CamelModel):
    """Published when a client places an order."""

    owner_id: int
    order: OrderSchema


class CookedOrderEvent(CamelModel):
    """Published when a restaurant marks an order as cooked."""

    order: OrderSchema


class OrderUpdateEvent(CamelModel):
    """Published on every status or driver change of an order."""

    owner_id: Optional[int] = None
    order: OrderSchema
