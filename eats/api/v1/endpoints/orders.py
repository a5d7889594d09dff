# eats/api/v1/endpoints/orders.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from eats.api.v1.dependencies.auth import guard
from eats.models.order import OrderStatus
from eats.models.user import User
from eats.schemas.order import (
    CreateOrderInput,
    CreateOrderOutput,
    EditOrderInput,
    EditOrderOutput,
    GetOrderOutput,
    GetOrdersOutput,
    TakeOrderOutput
)
from eats.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=CreateOrderOutput, operation_id="create_order")
async def create_order(
        data: CreateOrderInput,
        current_user: User = Depends(guard("create_order"))
) -> CreateOrderOutput:
    """
    Place an order.

    The restaurant owner is notified on the pending-orders subscription.
    """
    return await OrderService.create_order(current_user, data)


@router.get("", response_model=GetOrdersOutput, operation_id="get_orders")
async def get_orders(
        status_filter: Optional[OrderStatus] = Query(None, alias="status"),
        current_user: User = Depends(guard("get_orders"))
) -> GetOrdersOutput:
    return await OrderService.get_orders(current_user, status_filter)


@router.patch("", response_model=EditOrderOutput, operation_id="edit_order")
async def edit_order(
        data: EditOrderInput,
        current_user: User = Depends(guard("edit_order"))
) -> EditOrderOutput:
    return await OrderService.edit_order(current_user, data)


@router.get("/{order_id}", response_model=GetOrderOutput, operation_id="get_order")
async def get_order(
        order_id: int,
        current_user: User = Depends(guard("get_order"))
) -> GetOrderOutput:
    return await OrderService.get_order(current_user, order_id)


@router.post("/{order_id}/take", response_model=TakeOrderOutput, operation_id="take_order")
async def take_order(
        order_id: int,
        current_user: User = Depends(guard("take_order"))
) -> TakeOrderOutput:
    """Assign the current driver to the order."""
    return await OrderService.take_order(current_user, order_id)
