"""Cross-source story deduplication and ordering."""

import re
from typing import Dict, Iterable, List

from ..models import AggregatedItem, FeedItem

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def dedupe_key(item: FeedItem) -> str:
    """Get the key that identifies a story across feeds.

    The normalized link when there is one, else a slug of the title.
    """
    link = item.link.strip()
    if link:
        return "link:" + link.lower()
    return "title:" + _NON_ALNUM.sub("-", item.title.strip().lower())


def deduplicate(items: Iterable[FeedItem]) -> List[AggregatedItem]:
    """Merge items that share a dedup key.

    The first occurrence seeds the aggregate. Later occurrences add their
    source, and a strictly newer one also takes over the date, link and
    primary source.
    """
    grouped: Dict[str, AggregatedItem] = {}

    for item in items:
        key = dedupe_key(item)
        existing = grouped.get(key)
        if existing is None:
            grouped[key] = AggregatedItem.from_item(item)
            continue

        incoming = item.sources if isinstance(item, AggregatedItem) else [item.source_ref()]
        for ref in incoming:
            if not existing.has_source(ref.id):
                existing.sources.append(ref)

        if item.timestamp > existing.timestamp:
            existing.timestamp = item.timestamp
            existing.pub_date = item.pub_date
            existing.link = item.link
            existing.source_id = item.source_id
            existing.source_name = item.source_name

    return list(grouped.values())


def sort_by_recency(items: Iterable[AggregatedItem]) -> List[AggregatedItem]:
    """Newest first; equal timestamps keep their input order."""
    return sorted(items, key=lambda item: item.timestamp, reverse=True)
