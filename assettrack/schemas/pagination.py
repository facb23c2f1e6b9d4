"""
Generic paginated response schema.
Used by all list endpoints to provide consistent pagination metadata.
"""
from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


def page_count(total: int, size: int) -> int:
    if size <= 0:
        return 0
    return math.ceil(total / size)


def clamp_page(page: int, total: int, size: int) -> int:
    """Clamp a 1-indexed page number to the pages that exist (at least one)."""
    return min(max(page, 1), max(1, page_count(total, size)))


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Generic paginated response wrapper.
    Provides items, total count, current page, page size, and total pages.
    """

    items: list[T]
    total: int
    page: int
    size: int

    @computed_field  # type: ignore[misc]
    @property
    def pages(self) -> int:
        return page_count(self.total, self.size)

    @computed_field  # type: ignore[misc]
    @property
    def first_index(self) -> int:
        """1-based index of the first item on this page, 0 when empty."""
        if not self.items:
            return 0
        return (self.page - 1) * self.size + 1

    @computed_field  # type: ignore[misc]
    @property
    def last_index(self) -> int:
        if not self.items:
            return 0
        return self.first_index + len(self.items) - 1

    model_config = {"from_attributes": True}
