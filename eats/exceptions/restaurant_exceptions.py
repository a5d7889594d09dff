# eats/exceptions/restaurant_exceptions.py
from eats.exceptions.base import EatsError, ErrorKind


class RestaurantException(EatsError):
    """Base exception for restaurant-related errors."""
    pass


class RestaurantNotFoundError(RestaurantException):
    """Raised when restaurant is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, restaurant_id: int, message: str = "Restaurant not found"):
        self.restaurant_id = restaurant_id
        super().__init__(message)


class RestaurantAccessDeniedError(RestaurantException):
    """Raised when user doesn't own the restaurant."""

    kind = ErrorKind.NOT_OWNER

    def __init__(self, message: str = "You can't do that."):
        super().__init__(message)


class CategoryNotFoundError(RestaurantException):
    """Raised when category is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, slug: str, message: str = "Category not found"):
        self.slug = slug
        super().__init__(message)
