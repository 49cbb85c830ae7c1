"""Cache entry models."""

from typing import List, Optional

from pydantic import Field

from .base import NewslogModel
from .item import AggregatedItem, FeedItem


class SourceCacheEntry(NewslogModel):
    """Normalized items of one source, cached as feed_<id>.json."""

    timestamp: Optional[int] = Field(None, description="Write time in epoch seconds")
    items: List[FeedItem] = Field(default_factory=list)


class CombinedCacheEntry(NewslogModel):
    """Merged, deduplicated and sorted items, cached as combined_feed.json."""

    timestamp: Optional[int] = Field(None, description="Write time in epoch seconds")
    items: List[AggregatedItem] = Field(default_factory=list)
