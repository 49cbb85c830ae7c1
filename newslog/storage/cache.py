"""File-based JSON cache for per-source and combined feed data."""

import logging
import re
import time
from pathlib import Path
from typing import Iterable, Optional, Type, TypeVar, Union

from pydantic import ValidationError

from ..errors import CacheIOError, ConfigurationError
from ..models import CombinedCacheEntry, SourceCacheEntry
from .files import atomic_write_text

logger = logging.getLogger(__name__)

COMBINED_CACHE_NAME = "combined_feed.json"
SOURCE_CACHE_PREFIX = "feed_"

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9\-_.]")

EntryT = TypeVar("EntryT", SourceCacheEntry, CombinedCacheEntry)


def sanitize_source_id(source_id: str) -> str:
    """Map a source id onto a file-name safe character set."""
    safe = _UNSAFE_ID_CHARS.sub("-", source_id)
    # "." and ".." alone would still resolve outside the file name.
    if set(safe) <= {"."}:
        safe = safe.replace(".", "-")
    return safe


class CacheRepository:
    """Read and write cache entries with mtime-based staleness."""

    def __init__(
        self,
        directory: Union[str, Path],
        preserve: Iterable[str] = ("metrics.json",),
    ) -> None:
        """Initialize cache repository.

        ``preserve`` names files in the directory that cleanup must never
        delete (the metrics document lives next to the caches by default).
        """
        self.directory = Path(directory)
        self.preserve = set(preserve)

    def ensure_storage(self) -> None:
        """Create the cache directory if needed."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Failed to create cache directory {self.directory}: {e}"
            ) from e

    @property
    def combined_path(self) -> Path:
        return self.directory / COMBINED_CACHE_NAME

    def source_path(self, source_id: str) -> Path:
        return self.directory / f"{SOURCE_CACHE_PREFIX}{sanitize_source_id(source_id)}.json"

    def read_combined(self, ttl: int) -> Optional[CombinedCacheEntry]:
        return self._read(self.combined_path, ttl, CombinedCacheEntry)

    def read_source(self, source_id: str, ttl: int) -> Optional[SourceCacheEntry]:
        return self._read(self.source_path(source_id), ttl, SourceCacheEntry)

    def write_combined(self, entry: CombinedCacheEntry) -> CombinedCacheEntry:
        return self._write(self.combined_path, entry)

    def write_source(self, source_id: str, entry: SourceCacheEntry) -> SourceCacheEntry:
        return self._write(self.source_path(source_id), entry)

    def cleanup(self, max_age: int) -> int:
        """Delete cache files last modified more than ``max_age`` seconds ago.

        Returns the number of files removed.
        """
        cutoff = time.time() - max_age
        removed = 0
        for path in self._cache_files():
            try:
                if path.stat().st_mtime >= cutoff:
                    continue
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning("Failed to delete old cache file %s: %s", path, e)
        if removed:
            logger.debug("Removed %d stale cache files from %s", removed, self.directory)
        return removed

    def clear(self) -> int:
        """Delete every cache file regardless of age."""
        removed = 0
        for path in self._cache_files():
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning("Failed to delete cache file %s: %s", path, e)
        return removed

    def _cache_files(self):
        if not self.directory.is_dir():
            return []
        return [p for p in sorted(self.directory.glob("*.json")) if p.name not in self.preserve]

    def _read(self, path: Path, ttl: int, model: Type[EntryT]) -> Optional[EntryT]:
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot stat cache file %s: %s", path, e)
            return None

        if time.time() - mtime >= ttl:
            return None

        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read cache file %s: %s", path, e)
            return None

        try:
            entry = model.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring invalid cache file %s: %s", path, e.error_count())
            return None

        if entry.timestamp is None:
            entry.timestamp = int(mtime)
        return entry

    def _write(self, path: Path, entry: EntryT) -> EntryT:
        if entry.timestamp is None:
            entry = entry.model_copy(update={"timestamp": int(time.time())})
        try:
            atomic_write_text(path, entry.model_dump_json(by_alias=True))
        except OSError as e:
            raise CacheIOError(f"Failed to write cache file {path}: {e}") from e
        return entry
