"""Data models for the feed aggregator."""

from .cache import CombinedCacheEntry, SourceCacheEntry
from .item import AggregatedItem, FeedItem, SourceRef
from .metrics import SourceMetrics
from .page import ErrorResult, PageQuery, PageResult
from .source import FeedSource

__all__ = [
    "AggregatedItem",
    "CombinedCacheEntry",
    "ErrorResult",
    "FeedItem",
    "FeedSource",
    "PageQuery",
    "PageResult",
    "SourceCacheEntry",
    "SourceMetrics",
    "SourceRef",
]
