"""Feed aggregator: cache lookup, concurrent fetch, merge and pagination."""

import logging
import time
from typing import Dict, List, Mapping, Optional, Union

from ..config import Config
from ..errors import (
    CacheIOError,
    ConfigurationError,
    ParseError,
    ProtocolError,
    TransportError,
)
from ..ingestion import FeedClient, FetchResponse, parse_feed
from ..models import (
    CombinedCacheEntry,
    ErrorResult,
    FeedItem,
    FeedSource,
    PageQuery,
    PageResult,
    SourceCacheEntry,
)
from ..storage import CacheRepository, FeedRepository, MetricsRepository
from .dedup import deduplicate, sort_by_recency

logger = logging.getLogger(__name__)


class FeedAggregator:
    """Serve paginated, deduplicated headlines from all enabled feeds.

    Each call first tries the combined cache. On a miss, sources with a
    fresh per-source cache are reused and the rest are fetched together;
    failing sources are recorded in the metrics and left out.

    Two concurrent calls that both miss the cache fetch the same sources
    twice. The second write simply replaces the first.
    """

    def __init__(
        self,
        feed_repository: FeedRepository,
        cache_repository: CacheRepository,
        feed_client: FeedClient,
        metrics_repository: MetricsRepository,
        cache_ttl: int = 1800,
        cache_cleanup_max_age: int = 604800,
    ) -> None:
        """Initialize aggregator with its collaborators."""
        self.feed_repository = feed_repository
        self.cache_repository = cache_repository
        self.feed_client = feed_client
        self.metrics_repository = metrics_repository
        self.cache_ttl = cache_ttl
        self.cache_cleanup_max_age = cache_cleanup_max_age

    @classmethod
    def from_config(cls, config: Config) -> "FeedAggregator":
        """Wire the default file-backed components from configuration."""
        app = config.config
        metrics_path = config.metrics_path
        return cls(
            feed_repository=FeedRepository(config.feeds_path),
            cache_repository=CacheRepository(config.cache_dir, preserve=(metrics_path.name,)),
            feed_client=FeedClient(
                timeout=app.http.timeout,
                user_agent=app.http.user_agent,
                max_concurrent=app.http.max_concurrent,
            ),
            metrics_repository=MetricsRepository(metrics_path),
            cache_ttl=app.cache.ttl,
            cache_cleanup_max_age=app.cache.cleanup_max_age,
        )

    def get_all_feeds(
        self,
        limit: int = 10,
        offset: int = 0,
        include_total: bool = False,
    ) -> Union[PageResult, ErrorResult]:
        """Convenience wrapper building the :class:`PageQuery`."""
        return self.get_page(PageQuery(offset=offset, limit=limit, include_total=include_total))

    def get_page(self, query: Optional[PageQuery] = None) -> Union[PageResult, ErrorResult]:
        """Get one page of aggregated items. Never raises."""
        if query is None:
            query = PageQuery()

        try:
            sources = self.feed_repository.all()
            self.cache_repository.ensure_storage()
        except ConfigurationError as e:
            logger.error("Critical error preparing feeds: %s", e)
            return ErrorResult()

        try:
            self.cache_repository.cleanup(self.cache_cleanup_max_age)

            combined = self.cache_repository.read_combined(self.cache_ttl)
            if combined is None or not combined.items:
                combined = self.refresh(sources)
        except Exception:
            logger.exception("Unexpected error while aggregating feeds")
            return ErrorResult()

        return PageResult.from_items(combined.items, combined.timestamp, query)

    def refresh(self, sources: Mapping[str, FeedSource]) -> CombinedCacheEntry:
        """Rebuild the combined entry from per-source caches and fresh fetches."""
        source_items: Dict[str, List[FeedItem]] = {}
        to_fetch: Dict[str, FeedSource] = {}

        for source_id, source in sources.items():
            cached = self.cache_repository.read_source(source_id, self.cache_ttl)
            if cached is not None and cached.items:
                source_items[source_id] = cached.items
            else:
                to_fetch[source_id] = source

        if to_fetch:
            logger.info("Fetching %d of %d feeds", len(to_fetch), len(sources))
            responses = self.feed_client.fetch(to_fetch)
            for source_id, response in responses.items():
                source = to_fetch.get(source_id)
                if source is None:
                    continue
                items = self._process_response(source, response)
                if items:
                    source_items[source_id] = items

        # Registry order, so equal timestamps merge deterministically.
        all_items = [item for source_id in sources for item in source_items.get(source_id, [])]
        merged = sort_by_recency(deduplicate(all_items))

        entry = CombinedCacheEntry(timestamp=int(time.time()), items=merged)
        try:
            entry = self.cache_repository.write_combined(entry)
        except CacheIOError as e:
            logger.error("Failed to write combined cache: %s", e)
        return entry

    def _process_response(self, source: FeedSource, response: FetchResponse) -> List[FeedItem]:
        """Validate and parse one response; record the outcome in the metrics."""
        try:
            response.raise_for_failure()
            items = parse_feed(response.content, source)
        except TransportError as e:
            logger.warning("Transport error while fetching %s (%s): %s", source.name, source.url, e)
            self._record_failure(source.id, str(e))
            return []
        except ProtocolError as e:
            logger.warning("Unusable response from %s (%s): %s", source.name, source.url, e)
            self._record_failure(source.id, str(e), e.http_status)
            return []
        except ParseError as e:
            logger.warning(
                "Invalid feed from %s (%s): %s; content preview %r",
                source.name,
                source.url,
                e,
                response.content[:100],
            )
            self._record_failure(source.id, str(e), response.http_status)
            return []

        if not items:
            logger.warning("Feed %s returned no items", source.name)
            self._record_failure(source.id, "Parsed feed returned no items", response.http_status)
            return []

        try:
            self.cache_repository.write_source(source.id, SourceCacheEntry(items=items))
        except CacheIOError as e:
            logger.error("Failed to write cache for %s: %s", source.id, e)

        self._record_success(source.id, response.http_status)
        return items

    def _record_success(self, source_id: str, http_status: int) -> None:
        try:
            self.metrics_repository.record_success(source_id, http_status)
        except CacheIOError as e:
            logger.error("Failed to record metrics for %s: %s", source_id, e)

    def _record_failure(self, source_id: str, reason: str, http_status: Optional[int] = None) -> None:
        try:
            self.metrics_repository.record_failure(source_id, reason, http_status)
        except CacheIOError as e:
            logger.error("Failed to record metrics for %s: %s", source_id, e)
