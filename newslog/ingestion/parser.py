"""RSS/Atom feed parsing and item normalization."""

import calendar
import logging
import time
from typing import Any, List, Optional, Tuple, Union

import feedparser
import pendulum

from ..errors import ParseError
from ..models import FeedItem, FeedSource
from .formatting import clean_title

logger = logging.getLogger(__name__)

XML_DECLARATION = b"<?xml"


def parse_feed(content: Union[bytes, str], source: FeedSource) -> List[FeedItem]:
    """Parse an RSS 2.0 or Atom document into normalized items.

    RSS ``channel/item`` elements are used when present; otherwise Atom
    ``entry`` elements. Items without a title or link are dropped, and
    document order is kept.

    Raises:
        ParseError: content is not XML or cannot be parsed at all.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    if XML_DECLARATION not in content:
        raise ParseError("Malformed XML (missing declaration)")

    feed = feedparser.parse(content)

    if feed.bozo and not feed.entries:
        raise ParseError(f"XML parse error: {feed.get('bozo_exception')}")
    if feed.bozo:
        logger.debug("Recoverable XML issue in %s: %s", source.name, feed.get("bozo_exception"))

    items = []
    for entry in feed.entries:
        item = normalize_entry(entry, source)
        if item is not None:
            items.append(item)

    return items


def normalize_entry(entry: Any, source: FeedSource) -> Optional[FeedItem]:
    """Build a :class:`FeedItem` from a feedparser entry, or None if unusable."""
    title = clean_title((entry.get("title") or "").strip())
    link = (entry.get("link") or "").strip()
    if not title or not link:
        return None

    pub_date, timestamp = resolve_timestamp(entry, source)

    return FeedItem(
        title=title,
        link=link,
        pub_date=pub_date,
        timestamp=timestamp,
        source_id=source.id,
        source_name=source.name or source.id,
    )


def resolve_timestamp(entry: Any, source: FeedSource) -> Tuple[str, int]:
    """Get the raw date string and its epoch timestamp.

    RSS ``pubDate`` and Atom ``published`` both land in ``published``; Atom
    ``updated`` is the fallback. Unparseable dates become the current time.
    """
    for raw_key, parsed_key in (("published", "published_parsed"), ("updated", "updated_parsed")):
        raw = entry.get(raw_key)
        if not raw:
            continue

        parsed = entry.get(parsed_key)
        if parsed:
            return raw, calendar.timegm(parsed)

        timestamp = _parse_date_string(raw)
        if timestamp is not None:
            return raw, timestamp

        logger.warning("Invalid date format in feed %s: %r", source.name, raw)
        return raw, int(time.time())

    logger.warning("Missing date in feed %s for %r", source.name, entry.get("title", ""))
    return "", int(time.time())


def _parse_date_string(raw: str) -> Optional[int]:
    # Durations and bare times parse too but have no timestamp().
    try:
        return int(pendulum.parse(raw, strict=False).timestamp())
    except (ValueError, TypeError, OverflowError, AttributeError):
        return None
