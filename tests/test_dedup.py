from newslog.models import AggregatedItem, FeedItem, SourceRef
from newslog.pipeline import dedupe_key, deduplicate, sort_by_recency


def item(title, link, timestamp, source_id="alpha", source_name=None, pub_date=""):
    return FeedItem(
        title=title,
        link=link,
        pub_date=pub_date,
        timestamp=timestamp,
        source_id=source_id,
        source_name=source_name or source_id.title(),
    )


def test_key_uses_normalized_link():
    assert dedupe_key(item("A", "  HTTPS://Example.com/Story ", 1)) == "link:https://example.com/story"


def test_key_falls_back_to_title_slug():
    assert dedupe_key(item("  Breaking: Rates Rise -- 5%!  ", "", 1)) == "title:breaking-rates-rise-5-"


def test_unique_items_pass_through():
    items = [item("One", "https://e.com/1", 3), item("Two", "https://e.com/2", 2, "beta")]

    result = deduplicate(items)

    assert [(r.title, r.link, r.timestamp) for r in result] == [(i.title, i.link, i.timestamp) for i in items]
    assert [[ref.id for ref in r.sources] for r in result] == [["alpha"], ["beta"]]


def test_later_duplicate_takes_over_link_and_timestamp():
    older = item("Story", "https://e.com/s", 100, "alpha", "Alpha News", pub_date="old")
    newer = item("Story (updated)", "HTTPS://E.COM/S", 200, "beta", "Beta Times", pub_date="new")

    (merged,) = deduplicate([older, newer])

    assert merged.timestamp == 200
    assert merged.link == "HTTPS://E.COM/S"
    assert merged.source_id == "beta"
    assert merged.source_name == "Beta Times"
    assert merged.pub_date == "new"
    assert merged.title == "Story"
    assert merged.sources == [SourceRef(id="alpha", name="Alpha News"), SourceRef(id="beta", name="Beta Times")]


def test_older_duplicate_only_adds_source():
    newer = item("Story", "https://e.com/s", 200, "alpha")
    older = item("Story", "https://e.com/s", 100, "beta")

    (merged,) = deduplicate([newer, older])

    assert merged.timestamp == 200
    assert merged.source_id == "alpha"
    assert [ref.id for ref in merged.sources] == ["alpha", "beta"]


def test_equal_timestamp_keeps_first_seen():
    first = item("Story", "https://e.com/s", 100, "alpha")
    second = item("Story", "https://e.com/s", 100, "beta")

    (merged,) = deduplicate([first, second])

    assert merged.source_id == "alpha"


def test_merge_is_order_independent_up_to_source_order():
    a = item("Story", "https://e.com/s", 100, "alpha")
    b = item("Story", "https://e.com/s", 200, "beta")

    (ab,) = deduplicate([a, b])
    (ba,) = deduplicate([b, a])

    assert (ab.link, ab.timestamp, ab.source_id) == (ba.link, ba.timestamp, ba.source_id)
    assert {ref.id for ref in ab.sources} == {ref.id for ref in ba.sources} == {"alpha", "beta"}


def test_same_source_is_listed_once():
    (merged,) = deduplicate([item("S", "https://e.com/s", 1), item("S", "https://e.com/s", 2)])

    assert [ref.id for ref in merged.sources] == ["alpha"]
    assert merged.timestamp == 2


def test_title_key_merges_linkless_items():
    merged = deduplicate([item("Big News!", "", 1, "alpha"), item("big news?", "", 2, "beta")])

    assert len(merged) == 1
    assert [ref.id for ref in merged[0].sources] == ["alpha", "beta"]


def test_aggregated_input_keeps_its_sources():
    existing = AggregatedItem.from_item(item("S", "https://e.com/s", 1, "alpha"))
    existing.sources.append(SourceRef(id="beta", name="Beta"))

    (merged,) = deduplicate([existing, item("S", "https://e.com/s", 1, "gamma")])

    assert [ref.id for ref in merged.sources] == ["alpha", "beta", "gamma"]
    assert [ref.id for ref in existing.sources] == ["alpha", "beta"]


def test_sort_by_recency_is_stable():
    items = deduplicate(
        [
            item("A", "https://e.com/a", 100),
            item("B", "https://e.com/b", 300),
            item("C", "https://e.com/c", 100),
            item("D", "https://e.com/d", 200),
        ]
    )

    assert [i.title for i in sort_by_recency(items)] == ["B", "D", "A", "C"]
