# eats/services/order_service.py
import logging
from decimal import Decimal
from typing import Dict, List, Optional, Set

from tortoise.transactions import in_transaction

from eats.core.pubsub import Subscription
from eats.exceptions.order_exceptions import (
    DishNotInRestaurantError,
    InvalidStatusTransitionError,
    OrderAccessDeniedError,
    OrderAlreadyTakenError,
    OrderNotFoundError,
    OrderStatusForbiddenError
)
from eats.models.order import Order, OrderItem, OrderStatus
from eats.models.restaurant import Dish
from eats.models.user import User, UserRole
from eats.schemas.order import (
    CookedOrderEvent,
    CreateOrderInput,
    CreateOrderItemInput,
    CreateOrderOutput,
    EditOrderInput,
    EditOrderOutput,
    GetOrderOutput,
    GetOrdersOutput,
    OrderSchema,
    OrderUpdateEvent,
    PendingOrderEvent,
    TakeOrderOutput
)
from eats.services.envelope import returns_envelope
from eats.services.events import (
    get_pubsub,
    NEW_COOKED_ORDER,
    NEW_ORDER_UPDATE,
    NEW_PENDING_ORDER
)
from eats.services.restaurant_service import RestaurantService

logger = logging.getLogger(__name__)

ALLOWED_STATUS_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.COOKING],
    OrderStatus.COOKING: [OrderStatus.COOKED],
    OrderStatus.COOKED: [OrderStatus.PICKED_UP],
    OrderStatus.PICKED_UP: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [],
}

# Statuses each role may set.
ROLE_STATUSES: Dict[UserRole, Set[OrderStatus]] = {
    UserRole.CLIENT: set(),
    UserRole.OWNER: {OrderStatus.COOKING, OrderStatus.COOKED},
    UserRole.DELIVERY: {OrderStatus.PICKED_UP, OrderStatus.DELIVERED},
}


def item_price(dish: Dish, item: CreateOrderItemInput) -> Decimal:
    """
    Price of one ordered dish with the options picked.

    Each picked option adds its own ``extra`` and the ``extra`` of the
    picked choice. Options the dish doesn't offer add nothing.
    """
    price = Decimal(dish.price)
    dish_options = {option["name"]: option for option in dish.options or []}

    for picked in item.options:
        dish_option = dish_options.get(picked.name)
        if not dish_option:
            continue

        if dish_option.get("extra"):
            price += Decimal(str(dish_option["extra"]))

        if picked.choice is not None:
            for choice in dish_option.get("choices") or []:
                if choice["name"] == picked.choice and choice.get("extra"):
                    price += Decimal(str(choice["extra"]))

    return price


def can_see_order(user: User, order: Order) -> bool:
    """
    Whether the user takes part in the order.

    ``order.restaurant`` must already be fetched.
    """
    if user.role == UserRole.CLIENT:
        return order.customer_id == user.id
    if user.role == UserRole.DELIVERY:
        return order.driver_id == user.id
    if user.role == UserRole.OWNER:
        return order.restaurant is not None and order.restaurant.owner_id == user.id
    return False


class OrderService:
    """Service for placing orders and following their progress."""

    @staticmethod
    async def get_order_by_id(order_id: int) -> Order:
        """
        Get order by ID with its restaurant and items fetched.

        Raises:
            OrderNotFoundError: If order doesn't exist
        """
        order = await Order.get_or_none(id=order_id).prefetch_related("restaurant", "items")

        if not order:
            raise OrderNotFoundError(order_id)

        return order

    @staticmethod
    async def publish_update(order: Order) -> None:
        """Broadcast the current state of an order to its followers."""
        await get_pubsub().publish(
            NEW_ORDER_UPDATE,
            OrderUpdateEvent(
                owner_id=order.restaurant.owner_id if order.restaurant else None,
                order=OrderSchema.from_orm_order(order, include_items=True)
            )
        )

    @staticmethod
    @returns_envelope(CreateOrderOutput, "Could not create order.")
    async def create_order(customer: User, data: CreateOrderInput) -> CreateOrderOutput:
        """
        Place an order and notify the restaurant owner.

        Order and items are written in one transaction; the pending-order
        event goes out after commit.

        Args:
            customer: Client placing the order
            data: Restaurant and dishes with picked options

        Returns:
            Envelope carrying the new order id

        Raises:
            RestaurantNotFoundError: If restaurant doesn't exist
            DishNotInRestaurantError: If a dish isn't on the restaurant's menu
        """
        restaurant = await RestaurantService.get_restaurant_by_id(data.restaurant_id)

        priced_items = []
        for item in data.items:
            dish = await Dish.get_or_none(id=item.dish_id, restaurant_id=restaurant.id)
            if not dish:
                raise DishNotInRestaurantError(item.dish_id)
            priced_items.append((dish, item, item_price(dish, item)))

        total = sum((price for _, _, price in priced_items), Decimal("0"))

        async with in_transaction():
            order = await Order.create(
                customer=customer,
                restaurant=restaurant,
                total=total
            )
            for dish, item, _ in priced_items:
                await OrderItem.create(
                    order=order,
                    dish=dish,
                    options=[option.model_dump(exclude_none=True) for option in item.options]
                )

        await order.fetch_related("items")
        logger.info(f"Order {order.id} placed by user {customer.id} at restaurant {restaurant.id}")

        await get_pubsub().publish(
            NEW_PENDING_ORDER,
            PendingOrderEvent(
                owner_id=restaurant.owner_id,
                order=OrderSchema.from_orm_order(order, include_items=True)
            )
        )

        return CreateOrderOutput(ok=True, order_id=order.id)

    @staticmethod
    @returns_envelope(GetOrdersOutput, "Could not get orders")
    async def get_orders(user: User, status: Optional[OrderStatus] = None) -> GetOrdersOutput:
        """
        List the orders a user takes part in.

        Clients get the orders they placed, drivers the orders they drive
        and owners the orders of their restaurants.

        Args:
            user: User making the request
            status: Optional status filter

        Returns:
            Envelope with the orders, newest first
        """
        if user.role == UserRole.CLIENT:
            query = Order.filter(customer_id=user.id)
        elif user.role == UserRole.DELIVERY:
            query = Order.filter(driver_id=user.id)
        else:
            query = Order.filter(restaurant__owner_id=user.id)

        if status is not None:
            query = query.filter(status=status)

        orders = await query.prefetch_related("items")

        return GetOrdersOutput(
            ok=True,
            orders=[OrderSchema.from_orm_order(order, include_items=True) for order in orders]
        )

    @staticmethod
    @returns_envelope(GetOrderOutput, "Could not load order.")
    async def get_order(user: User, order_id: int) -> GetOrderOutput:
        """
        Get one order the user takes part in.

        Raises:
            OrderNotFoundError: If order doesn't exist
            OrderAccessDeniedError: If user isn't part of the order
        """
        order = await OrderService.get_order_by_id(order_id)

        if not can_see_order(user, order):
            raise OrderAccessDeniedError()

        return GetOrderOutput(ok=True, order=OrderSchema.from_orm_order(order, include_items=True))

    @staticmethod
    @returns_envelope(EditOrderOutput, "Could not edit order.")
    async def edit_order(user: User, data: EditOrderInput) -> EditOrderOutput:
        """
        Move an order to its next status.

        Owners cook (Pending -> Cooking -> Cooked), the assigned driver
        delivers (Cooked -> PickedUp -> Delivered).

        Args:
            user: User making the request
            data: Order id and the new status

        Returns:
            Envelope with ok=True on success

        Raises:
            OrderNotFoundError: If order doesn't exist
            OrderAccessDeniedError: If user isn't part of the order
            OrderStatusForbiddenError: If the user's role may not set the status
            InvalidStatusTransitionError: If the status doesn't follow the current one
        """
        order = await OrderService.get_order_by_id(data.order_id)

        if not can_see_order(user, order):
            raise OrderAccessDeniedError()

        if data.status not in ROLE_STATUSES.get(user.role, set()):
            raise OrderStatusForbiddenError()

        if data.status not in ALLOWED_STATUS_TRANSITIONS[order.status]:
            raise InvalidStatusTransitionError(order.status.value, data.status.value)

        previous = order.status
        order.status = data.status
        await order.save(update_fields=["status", "updated_at"])

        logger.info(f"Order {order.id} status {previous.value} -> {order.status.value} by user {user.id}")

        await OrderService.publish_update(order)

        if order.status == OrderStatus.COOKED:
            await get_pubsub().publish(
                NEW_COOKED_ORDER,
                CookedOrderEvent(order=OrderSchema.from_orm_order(order, include_items=True))
            )

        return EditOrderOutput(ok=True)

    @staticmethod
    @returns_envelope(TakeOrderOutput, "Could not update order.")
    async def take_order(driver: User, order_id: int) -> TakeOrderOutput:
        """
        Assign a driver to an order that has none.

        Raises:
            OrderNotFoundError: If order doesn't exist
            OrderAlreadyTakenError: If another driver took it first
        """
        order = await OrderService.get_order_by_id(order_id)

        if order.driver_id is not None:
            raise OrderAlreadyTakenError()

        # Conditional write so two drivers can't both win.
        updated = await Order.filter(id=order.id, driver_id__isnull=True).update(driver_id=driver.id)
        if not updated:
            raise OrderAlreadyTakenError()

        order.driver_id = driver.id
        logger.info(f"Order {order.id} taken by driver {driver.id}")

        await OrderService.publish_update(order)

        return TakeOrderOutput(ok=True)

    # ----- Subscriptions -----

    @staticmethod
    async def pending_orders(owner: User) -> Subscription:
        """New orders placed at the owner's restaurants."""
        return await get_pubsub().subscribe(
            NEW_PENDING_ORDER,
            filter=lambda event: event.owner_id == owner.id,
            resolve=lambda event: event.order
        )

    @staticmethod
    async def cooked_orders(driver: User) -> Subscription:
        """Every order that is ready for pick-up."""
        return await get_pubsub().subscribe(
            NEW_COOKED_ORDER,
            resolve=lambda event: event.order
        )

    @staticmethod
    async def order_updates(user: User, order_id: int) -> Subscription:
        """Changes to one order, for the people taking part in it."""

        def follows(event: OrderUpdateEvent) -> bool:
            order = event.order
            return order.id == order_id and user.id in (
                order.customer_id,
                order.driver_id,
                event.owner_id,
            )

        return await get_pubsub().subscribe(
            NEW_ORDER_UPDATE,
            filter=follows,
            resolve=lambda event: event.order
        )
