# eats/schemas/common.py
import math
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


PAGE_SIZE = 25


def count_pages(total_results: int) -> int:
    """Number of PAGE_SIZE pages needed for total_results items."""
    return math.ceil(total_results / PAGE_SIZE)


def page_offset(page: int) -> int:
    """Rows to skip before the given 1-based page."""
    return (page - 1) * PAGE_SIZE


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CoreOutput(CamelModel):
    """Envelope returned by every public operation."""

    ok: bool
    error: Optional[str] = None


class PaginationOutput(CoreOutput):
    total_pages: Optional[int] = None
    total_results: Optional[int] = None
