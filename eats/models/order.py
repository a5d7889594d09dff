# eats/models/order.py
from enum import Enum

from tortoise import Model, fields


class OrderStatus(str, Enum):
    """Enum for order statuses."""

    PENDING = "Pending"
    COOKING = "Cooking"
    COOKED = "Cooked"
    PICKED_UP = "PickedUp"
    DELIVERED = "Delivered"


class Order(Model):
    """
    Order placed by a client against a restaurant.
    """

    id = fields.IntField(pk=True)
    customer = fields.ForeignKeyField(
        "models.User",
        related_name="orders",
        null=True,
        on_delete=fields.SET_NULL
    )
    driver = fields.ForeignKeyField(
        "models.User",
        related_name="rides",
        null=True,
        on_delete=fields.SET_NULL
    )
    restaurant = fields.ForeignKeyField(
        "models.Restaurant",
        related_name="orders",
        null=True,
        on_delete=fields.SET_NULL
    )
    total = fields.DecimalField(max_digits=10, decimal_places=2, null=True)
    status = fields.CharEnumField(OrderStatus, max_length=20, default=OrderStatus.PENDING)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    items: fields.ReverseRelation["OrderItem"]

    class Meta:
        table = "orders"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Order #{self.id} ({self.status.value})"


class OrderItem(Model):
    """
    One dish in an order with the options the client picked.

    ``options`` holds a list of ``{"name", "choice"}`` entries.
    """

    id = fields.IntField(pk=True)
    order = fields.ForeignKeyField(
        "models.Order",
        related_name="items",
        on_delete=fields.CASCADE
    )
    dish = fields.ForeignKeyField(
        "models.Dish",
        related_name="order_items",
        null=True,
        on_delete=fields.SET_NULL
    )
    options = fields.JSONField(default=list)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "order_items"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"Item of order #{self.order_id}"
