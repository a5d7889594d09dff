# eats/exceptions/base.py
from enum import Enum


class ErrorKind(str, Enum):
    """Categories of domain failures, kept for logging and tests."""

    NOT_FOUND = "not_found"
    NOT_OWNER = "not_owner"
    FORBIDDEN = "forbidden"
    INVALID_TRANSITION = "invalid_transition"
    CONFLICT = "conflict"
    INVALID_INPUT = "invalid_input"
    PERSISTENCE_FAULT = "persistence_fault"


class EatsError(Exception):
    """
    Base exception for domain failures.

    The message is user-facing and ends up in the ``error`` field of the
    response envelope.
    """

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
