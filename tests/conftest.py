from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pytest

from newslog.config import save_feeds
from newslog.ingestion import FeedClient, FetchResponse
from newslog.models import FeedSource
from newslog.pipeline import FeedAggregator
from newslog.storage import CacheRepository, FeedRepository, MetricsRepository

# (title, link, pubDate)
RssItem = Tuple[str, str, str]


def rss_document(items: Iterable[RssItem], title: str = "Test Feed") -> bytes:
    body = "".join(
        f"""
    <item>
      <title>{item_title}</title>
      <link>{link}</link>
      <pubDate>{pub_date}</pubDate>
    </item>"""
        for item_title, link, pub_date in items
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>{title}</title>
    <link>https://example.com/</link>
    <description>Test</description>{body}
  </channel>
</rss>
""".encode("utf-8")


def atom_document(entries: Iterable[Tuple[str, str, str, str]]) -> bytes:
    """Entries are (title, href, published, updated); empty strings are omitted."""
    parts = []
    for title, href, published, updated in entries:
        xml = f"<entry><title>{title}</title><id>{href or title}</id>"
        if href:
            xml += f'<link rel="alternate" href="{href}"/>'
        if published:
            xml += f"<published>{published}</published>"
        if updated:
            xml += f"<updated>{updated}</updated>"
        parts.append(xml + "</entry>")
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<feed xmlns="http://www.w3.org/2005/Atom">'
        "<title>Atom Test</title><id>urn:test</id><updated>2024-10-07T12:00:00Z</updated>"
        + "".join(parts)
        + "</feed>"
    ).encode("utf-8")


class FakeFeedClient(FeedClient):
    """Feed client returning canned responses instead of using the network."""

    def __init__(self, responses: Optional[Mapping[str, FetchResponse]] = None) -> None:
        super().__init__(timeout=10)
        self.responses: Dict[str, FetchResponse] = dict(responses or {})
        self.calls: List[List[str]] = []

    def fetch(self, sources):
        self.calls.append(sorted(sources))
        return {source_id: self.responses[source_id] for source_id in sources if source_id in self.responses}


def ok(source_id: str, content: bytes, status: int = 200) -> FetchResponse:
    return FetchResponse(source_id=source_id, content=content, http_status=status)


@pytest.fixture
def feeds_path(tmp_path):
    path = tmp_path / "feeds.yaml"
    save_feeds(
        [
            FeedSource(id="alpha", name="Alpha News", url="https://alpha.example.com/rss"),
            FeedSource(id="beta", name="Beta Times", url="https://beta.example.com/rss"),
        ],
        path,
    )
    return path


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def metrics(cache_dir):
    return MetricsRepository(cache_dir / "metrics.json")


@pytest.fixture
def make_aggregator(feeds_path, cache_dir, metrics):
    def factory(client: FeedClient, ttl: int = 1800) -> FeedAggregator:
        return FeedAggregator(
            feed_repository=FeedRepository(feeds_path),
            cache_repository=CacheRepository(cache_dir),
            feed_client=client,
            metrics_repository=metrics,
            cache_ttl=ttl,
            cache_cleanup_max_age=604800,
        )

    return factory
