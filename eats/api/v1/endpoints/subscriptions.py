# eats/api/v1/endpoints/subscriptions.py
"""
Websocket feeds over the order event channel.

Clients authenticate with ``Authorization: Bearer <token>`` or, where
browsers can't set headers, ``?token=<token>``. Each message is one order
as camelCase JSON.
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from starlette.websockets import WebSocketState

from eats.api.v1.dependencies.auth import get_user_from_token
from eats.api.v1.roles import can_activate, OPERATION_ROLES
from eats.core.pubsub import Subscription
from eats.models.user import User
from eats.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def get_websocket_token(websocket: WebSocket) -> Optional[str]:
    authorization = websocket.headers.get("authorization")
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return websocket.query_params.get("token")


async def authorize_websocket(websocket: WebSocket, operation: str) -> Optional[User]:
    """
    Run the role check for a websocket operation.

    Denied connections are closed with 1008 before the handshake completes.

    Returns:
        The user, or None if the connection was closed
    """
    user = await get_user_from_token(get_websocket_token(websocket))

    if not can_activate(OPERATION_ROLES.get(operation), user):
        logger.info(f"Subscription {operation} denied")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Forbidden resource")
        return None

    return user


async def stream(websocket: WebSocket, subscription: Subscription) -> None:
    """
    Forward events until the client goes away or the subscription ends.

    Whichever side finishes first cancels the other; both tasks are awaited
    so a failed send is logged instead of lost.
    """

    async def forward() -> None:
        async for order in subscription:
            await websocket.send_json(order.model_dump(mode="json", by_alias=True))

    async def receive() -> None:
        while True:
            await websocket.receive_text()

    await websocket.accept()
    forward_task = asyncio.create_task(forward())
    receive_task = asyncio.create_task(receive())

    try:
        await asyncio.wait({forward_task, receive_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        forward_task.cancel()
        receive_task.cancel()
        forwarded, received = await asyncio.gather(forward_task, receive_task, return_exceptions=True)
        await subscription.close()

    if isinstance(received, WebSocketDisconnect):
        logger.debug(f"Subscriber to {subscription.topic} disconnected")
    elif isinstance(forwarded, Exception):
        logger.warning(f"Subscriber to {subscription.topic} dropped: {forwarded!r}")
    elif websocket.client_state == WebSocketState.CONNECTED:
        await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)


@router.websocket("/pending-orders")
async def pending_orders(websocket: WebSocket):
    """Orders placed at the current owner's restaurants."""
    user = await authorize_websocket(websocket, "pending_orders")
    if user is None:
        return

    await stream(websocket, await OrderService.pending_orders(user))


@router.websocket("/cooked-orders")
async def cooked_orders(websocket: WebSocket):
    """Orders ready for pick-up, for drivers."""
    user = await authorize_websocket(websocket, "cooked_orders")
    if user is None:
        return

    await stream(websocket, await OrderService.cooked_orders(user))


@router.websocket("/order-updates/{order_id}")
async def order_updates(websocket: WebSocket, order_id: int):
    """Status and driver changes of one order."""
    user = await authorize_websocket(websocket, "order_updates")
    if user is None:
        return

    await stream(websocket, await OrderService.order_updates(user, order_id))
