# eats/exceptions/order_exceptions.py
from eats.exceptions.base import EatsError, ErrorKind


class OrderException(EatsError):
    """Base exception for order-related errors."""
    pass


class OrderNotFoundError(OrderException):
    """Raised when order is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, order_id: int, message: str = "Order not found."):
        self.order_id = order_id
        super().__init__(message)


class OrderAccessDeniedError(OrderException):
    """Raised when user is not a participant of the order."""

    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "You can't see that"):
        super().__init__(message)


class OrderStatusForbiddenError(OrderException):
    """Raised when the user's role may not set the requested status."""

    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "You can't do that."):
        super().__init__(message)


class InvalidStatusTransitionError(OrderException):
    """Raised when the requested status does not follow the current one."""

    kind = ErrorKind.INVALID_TRANSITION

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Invalid status transition from '{current}' to '{requested}'"
        )


class OrderAlreadyTakenError(OrderException):
    """Raised when a driver tries to take an order that has one."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str = "This order already has a driver"):
        super().__init__(message)


class DishNotInRestaurantError(OrderException):
    """Raised when an ordered dish is not on the restaurant's menu."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, dish_id: int, message: str = "Dish not found."):
        self.dish_id = dish_id
        super().__init__(message)
