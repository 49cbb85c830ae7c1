"""Feed source registry backed by the feeds file."""

from pathlib import Path
from typing import Dict, List, Optional, Union

from ..config import load_feeds, save_feeds
from ..errors import ConfigurationError
from ..models import FeedSource


class FeedRepository:
    """Manage feed definitions.

    The aggregator only reads through :meth:`all`; the mutating methods back
    the ``newslog sources`` commands.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Initialize feed repository."""
        self.path = Path(path)
        self._feeds: Optional[List[FeedSource]] = None

    def all(self) -> Dict[str, FeedSource]:
        """Get enabled feeds keyed by id.

        Raises:
            ConfigurationError: registry file missing, unreadable or empty.
        """
        return {feed.id: feed for feed in self.all_with_meta() if feed.enabled}

    def all_with_meta(self) -> List[FeedSource]:
        """Get every feed, enabled or not, in file order."""
        if self._feeds is None:
            feeds = load_feeds(self.path)
            if not feeds:
                raise ConfigurationError("Feed configuration is invalid")
            self._feeds = feeds
        return list(self._feeds)

    def get(self, feed_id: str) -> Optional[FeedSource]:
        for feed in self._load_for_update():
            if feed.id == feed_id:
                return feed
        return None

    def add(self, feed_id: str, name: str, url: str, enabled: bool = True) -> FeedSource:
        """Add a new feed. Raises ValueError if the id or URL is taken."""
        feeds = self._load_for_update()
        if any(f.id == feed_id or f.url == url for f in feeds):
            raise ValueError(f"Feed '{feed_id}' or its URL already exists")

        feed = FeedSource(id=feed_id, name=name, url=url, enabled=enabled)
        feeds.append(feed)
        self._save(feeds)
        return feed

    def set_enabled(self, feed_id: str, enabled: bool) -> FeedSource:
        return self._replace(feed_id, enabled=enabled)

    def update(
        self,
        feed_id: str,
        name: Optional[str] = None,
        url: Optional[str] = None,
    ) -> FeedSource:
        changes = {}
        if name:
            changes["name"] = name
        if url:
            changes["url"] = url
        return self._replace(feed_id, **changes)

    def remove(self, feed_id: str) -> None:
        feeds = self._load_for_update()
        remaining = [f for f in feeds if f.id != feed_id]
        if len(remaining) == len(feeds):
            raise ValueError(f"Feed '{feed_id}' not found")
        self._save(remaining)

    def _replace(self, feed_id: str, **changes) -> FeedSource:
        feeds = self._load_for_update()
        for index, feed in enumerate(feeds):
            if feed.id == feed_id:
                updated = feed.model_copy(update=changes)
                feeds[index] = updated
                self._save(feeds)
                return updated
        raise ValueError(f"Feed '{feed_id}' not found")

    def _load_for_update(self) -> List[FeedSource]:
        if not self.path.exists():
            return []
        return load_feeds(self.path)

    def _save(self, feeds: List[FeedSource]) -> None:
        save_feeds(feeds, self.path)
        self._feeds = None
