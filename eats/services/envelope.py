# eats/services/envelope.py
import functools
import logging
from typing import Awaitable, Callable, Type, TypeVar

from eats.exceptions.base import EatsError, ErrorKind
from eats.schemas.common import CoreOutput

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=CoreOutput)


def returns_envelope(
        output_cls: Type[OutputT],
        failure_message: str
) -> Callable[[Callable[..., Awaitable[OutputT]]], Callable[..., Awaitable[OutputT]]]:
    """
    Turn a service coroutine into a public operation.

    Domain errors become ``{ok: false, error: <their message>}``; anything
    else is logged with its traceback and becomes
    ``{ok: false, error: failure_message}``. Nothing escapes.

    Args:
        output_cls: Envelope type returned by the operation
        failure_message: Fixed message for unexpected faults
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except EatsError as e:
                logger.info(f"{func.__qualname__} rejected ({e.kind.value}): {e.message}")
                return output_cls(ok=False, error=e.message)
            except Exception:
                logger.exception(f"{func.__qualname__} failed ({ErrorKind.PERSISTENCE_FAULT.value})")
                return output_cls(ok=False, error=failure_message)

        return wrapper

    return decorator
