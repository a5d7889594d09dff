# eats/exceptions/dish_exceptions.py
from eats.exceptions.base import EatsError, ErrorKind


class DishException(EatsError):
    """Base exception for dish-related errors."""
    pass


class DishNotFoundError(DishException):
    """Raised when dish is not found in database."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, dish_id: int, message: str = "Dish not found"):
        self.dish_id = dish_id
        super().__init__(message)
