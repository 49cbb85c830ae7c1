"""Paginated query models."""

import time
from typing import Any, List, Optional, Sequence

from pydantic import Field, field_validator

from .base import NewslogModel
from .item import AggregatedItem

DEFAULT_LIMIT = 10
MAX_LIMIT = 50
GENERIC_ERROR = "Failed to fetch feeds. Please try again later."


class PageQuery(NewslogModel):
    """Pagination input. Out-of-range values fall back to defaults."""

    offset: int = Field(0)
    limit: int = Field(DEFAULT_LIMIT)
    include_total: bool = Field(False, alias="includeTotal")

    @field_validator("offset", mode="before")
    @classmethod
    def clamp_offset(cls, v: Any) -> int:
        try:
            v = int(v)
        except (TypeError, ValueError):
            return 0
        return v if v >= 0 else 0

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Any) -> int:
        try:
            v = int(v)
        except (TypeError, ValueError):
            return DEFAULT_LIMIT
        if v < 1 or v > MAX_LIMIT:
            return DEFAULT_LIMIT
        return v


class PageResult(NewslogModel):
    """One page of aggregated items."""

    timestamp: int
    items: List[AggregatedItem] = Field(default_factory=list)
    has_more: bool = Field(False, alias="hasMore")
    offset: int = 0
    limit: int = DEFAULT_LIMIT
    total_count: Optional[int] = Field(None, alias="totalCount")

    @classmethod
    def from_items(
        cls,
        items: Sequence[AggregatedItem],
        timestamp: Optional[int],
        query: PageQuery,
    ) -> "PageResult":
        """Slice ``items`` according to ``query``."""
        total = len(items)
        end = query.offset + query.limit
        return cls(
            timestamp=timestamp if timestamp is not None else int(time.time()),
            items=list(items[query.offset:end]),
            has_more=end < total,
            offset=query.offset,
            limit=query.limit,
            total_count=total if query.include_total else None,
        )


class ErrorResult(NewslogModel):
    """Structured failure returned instead of raising to the caller."""

    timestamp: int = Field(default_factory=lambda: int(time.time()))
    error: str = GENERIC_ERROR
    items: List[AggregatedItem] = Field(default_factory=list)
    has_more: bool = Field(False, alias="hasMore")
