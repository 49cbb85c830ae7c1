"""Per-source fetch metrics persisted as one JSON document."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import pendulum
from pydantic import ValidationError

from ..errors import CacheIOError
from ..models import SourceMetrics
from .files import atomic_write_text

logger = logging.getLogger(__name__)


class MetricsRepository:
    """Track success and failure counters for each feed source.

    Every update re-reads the document from disk before writing it back.
    There is no lock, so two processes updating at the same moment can
    lose one of the updates.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Initialize metrics repository."""
        self.path = Path(path)

    def all(self) -> Dict[str, SourceMetrics]:
        """Get metrics for every source that has been recorded."""
        return self._load()

    def get(self, source_id: str) -> Optional[SourceMetrics]:
        return self._load().get(source_id)

    def record_success(self, source_id: str, http_status: Optional[int] = None) -> SourceMetrics:
        """Count a successful fetch and clear the failure streak."""
        metrics = self._load()
        entry = metrics.get(source_id) or SourceMetrics(id=source_id)

        entry.success_count += 1
        entry.consecutive_failures = 0
        entry.last_success = self._now()
        if http_status is not None:
            entry.last_http_status = http_status

        metrics[source_id] = entry
        self._persist(metrics)
        return entry

    def record_failure(
        self,
        source_id: str,
        reason: str = "",
        http_status: Optional[int] = None,
    ) -> SourceMetrics:
        """Count a failed fetch; a non-empty reason replaces the last error."""
        metrics = self._load()
        entry = metrics.get(source_id) or SourceMetrics(id=source_id)

        entry.failure_count += 1
        entry.consecutive_failures += 1
        entry.last_failure = self._now()
        if reason:
            entry.last_error = reason
            entry.last_http_status = http_status

        metrics[source_id] = entry
        self._persist(metrics)
        return entry

    def reset(self, source_id: str) -> bool:
        """Reset a source's counters. Returns False if it was never recorded."""
        metrics = self._load()
        if source_id not in metrics:
            return False

        metrics[source_id] = SourceMetrics(id=source_id)
        self._persist(metrics)
        return True

    def _load(self) -> Dict[str, SourceMetrics]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read metrics file %s: %s", self.path, e)
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring corrupt metrics file %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            return {}

        metrics = {}
        for source_id, entry in data.items():
            if not isinstance(entry, dict):
                continue
            try:
                metrics[source_id] = SourceMetrics(**{**entry, "id": source_id})
            except ValidationError as e:
                logger.warning("Dropping invalid metrics for %s: %s", source_id, e.error_count())
        return metrics

    def _persist(self, metrics: Dict[str, SourceMetrics]) -> None:
        document = {source_id: entry.model_dump() for source_id, entry in metrics.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            atomic_write_text(self.path, json.dumps(document, indent=2))
        except OSError as e:
            raise CacheIOError(f"Failed to write feed metrics file {self.path}: {e}") from e

    @staticmethod
    def _now() -> str:
        return pendulum.now("UTC").to_iso8601_string()
