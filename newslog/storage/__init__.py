"""File-based storage for caches, metrics and the feed registry."""

from .cache import CacheRepository, sanitize_source_id
from .feeds import FeedRepository
from .metrics import MetricsRepository

__all__ = ["CacheRepository", "FeedRepository", "MetricsRepository", "sanitize_source_id"]
