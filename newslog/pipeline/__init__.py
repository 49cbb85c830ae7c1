"""Aggregation pipeline."""

from .aggregator import FeedAggregator
from .dedup import dedupe_key, deduplicate, sort_by_recency

__all__ = ["FeedAggregator", "dedupe_key", "deduplicate", "sort_by_recency"]
