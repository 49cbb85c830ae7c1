import json
import os
import time

import pytest

from newslog.errors import CacheIOError, ConfigurationError
from newslog.models import AggregatedItem, CombinedCacheEntry, FeedItem, SourceCacheEntry, SourceRef
from newslog.storage import CacheRepository, sanitize_source_id


def make_item(n: int, source_id: str = "alpha") -> FeedItem:
    return FeedItem(
        title=f"Story {n}",
        link=f"https://example.com/{n}",
        pub_date="Mon, 07 Oct 2024 12:00:00 +0000",
        timestamp=1728302400 + n,
        source_id=source_id,
        source_name=source_id.title(),
    )


def age(path, seconds: int) -> None:
    past = time.time() - seconds
    os.utime(path, (past, past))


@pytest.fixture
def repo(cache_dir):
    repository = CacheRepository(cache_dir)
    repository.ensure_storage()
    return repository


def test_source_entry_round_trip(repo):
    entry = SourceCacheEntry(items=[make_item(1), make_item(2)])

    written = repo.write_source("alpha", entry)
    loaded = repo.read_source("alpha", ttl=60)

    assert loaded is not None
    assert loaded.model_dump() == written.model_dump()
    assert loaded.timestamp == written.timestamp


def test_combined_entry_round_trip(repo):
    item = AggregatedItem.from_item(make_item(1))
    item.sources.append(SourceRef(id="beta", name="Beta"))

    repo.write_combined(CombinedCacheEntry(items=[item]))
    loaded = repo.read_combined(ttl=60)

    assert loaded.items == [item]
    assert [ref.id for ref in loaded.items[0].sources] == ["alpha", "beta"]


def test_file_layout_uses_wire_names(repo):
    repo.write_source("alpha", SourceCacheEntry(items=[make_item(1)]))

    data = json.loads((repo.directory / "feed_alpha.json").read_text())

    assert isinstance(data["timestamp"], int)
    assert set(data["items"][0]) == {"title", "link", "pubDate", "timestamp", "sourceId", "sourceName"}


def test_write_stamps_current_time(repo):
    before = int(time.time())

    written = repo.write_combined(CombinedCacheEntry(items=[]))

    assert before <= written.timestamp <= int(time.time())


def test_existing_timestamp_is_kept(repo):
    written = repo.write_source("alpha", SourceCacheEntry(timestamp=12345, items=[make_item(1)]))

    assert written.timestamp == 12345
    assert repo.read_source("alpha", ttl=60).timestamp == 12345


def test_stale_entry_is_a_miss(repo):
    repo.write_source("alpha", SourceCacheEntry(items=[make_item(1)]))
    age(repo.source_path("alpha"), 120)

    assert repo.read_source("alpha", ttl=60) is None
    assert repo.read_source("alpha", ttl=600) is not None


def test_age_equal_to_ttl_is_stale(repo):
    repo.write_combined(CombinedCacheEntry(items=[]))
    age(repo.combined_path, 100)

    assert repo.read_combined(ttl=100) is None


def test_missing_file_is_a_miss(repo):
    assert repo.read_combined(ttl=60) is None
    assert repo.read_source("nope", ttl=60) is None


def test_invalid_json_is_a_miss(repo):
    repo.combined_path.write_text('{"timestamp": 1, "items": [', encoding="utf-8")

    assert repo.read_combined(ttl=60) is None


def test_wrong_shape_is_a_miss(repo):
    repo.source_path("alpha").write_text('{"items": [{"title": "no link"}]}', encoding="utf-8")

    assert repo.read_source("alpha", ttl=60) is None


def test_missing_timestamp_is_filled_from_mtime(repo):
    repo.combined_path.write_text('{"items": []}', encoding="utf-8")

    entry = repo.read_combined(ttl=60)

    assert entry.timestamp == int(repo.combined_path.stat().st_mtime)


def test_write_leaves_no_temp_files(repo):
    repo.write_source("alpha", SourceCacheEntry(items=[make_item(1)]))
    repo.write_source("alpha", SourceCacheEntry(items=[make_item(2)]))

    assert sorted(p.name for p in repo.directory.iterdir()) == ["feed_alpha.json"]


def test_write_failure_raises_cache_error(tmp_path):
    repo = CacheRepository(tmp_path / "does-not-exist")

    with pytest.raises(CacheIOError):
        repo.write_combined(CombinedCacheEntry(items=[]))


def test_ensure_storage_failure_is_configuration_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(ConfigurationError):
        CacheRepository(blocker / "cache").ensure_storage()


@pytest.mark.parametrize(
    "source_id, expected",
    [
        ("bbc-world", "bbc-world"),
        ("feed.v2_final", "feed.v2_final"),
        ("../../etc/passwd", "..-..-etc-passwd"),
        ("a/b", "a-b"),
        ("..", "--"),
        ("spaces and ünïcode", "spaces-and--n-code"),
    ],
)
def test_sanitize_source_id(source_id, expected):
    assert sanitize_source_id(source_id) == expected


def test_source_path_stays_in_directory(repo):
    path = repo.source_path("../../escape")

    assert path.parent == repo.directory
    assert path.name == "feed_..-..-escape.json"


def test_cleanup_removes_only_old_files(repo):
    repo.write_source("old", SourceCacheEntry(items=[make_item(1)]))
    repo.write_source("fresh", SourceCacheEntry(items=[make_item(2)]))
    metrics = repo.directory / "metrics.json"
    metrics.write_text("{}")
    age(repo.source_path("old"), 1000)
    age(metrics, 1000)

    removed = repo.cleanup(max_age=500)

    assert removed == 1
    assert not repo.source_path("old").exists()
    assert repo.source_path("fresh").exists()
    assert metrics.exists()


def test_cleanup_without_directory_is_noop(tmp_path):
    assert CacheRepository(tmp_path / "missing").cleanup(max_age=1) == 0


def test_clear_keeps_metrics(repo):
    repo.write_source("alpha", SourceCacheEntry(items=[make_item(1)]))
    repo.write_combined(CombinedCacheEntry(items=[]))
    (repo.directory / "metrics.json").write_text("{}")

    assert repo.clear() == 2
    assert sorted(p.name for p in repo.directory.iterdir()) == ["metrics.json"]
