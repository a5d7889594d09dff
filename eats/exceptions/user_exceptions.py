# eats/exceptions/user_exceptions.py
from eats.exceptions.base import EatsError, ErrorKind


class UserException(EatsError):
    """Base exception for user-related errors."""
    pass


class UserAlreadyExistsError(UserException):
    """Raised when the e-mail is already registered."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str = "There is a user with that email already"):
        super().__init__(message)


class UserNotFoundError(UserException):
    """Raised when user is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class WrongPasswordError(UserException):
    """Raised when the password does not match."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str = "Wrong password"):
        super().__init__(message)


class VerificationNotFoundError(UserException):
    """Raised when verification code is unknown."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Verification not found."):
        super().__init__(message)
