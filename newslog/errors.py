"""Exception hierarchy for the feed aggregation pipeline."""

from typing import Optional


class NewslogError(Exception):
    """Base class for all newslog errors."""

    def __init__(self, message: str, http_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class ConfigurationError(NewslogError):
    """Feed registry or application configuration is missing or invalid."""


class TransportError(NewslogError):
    """Network-level failure (DNS, connect, timeout) for a single source."""


class ProtocolError(NewslogError):
    """Source answered with a non-success HTTP status or an empty body."""


class ParseError(NewslogError):
    """Feed document could not be parsed."""


class CacheIOError(NewslogError):
    """Cache or metrics file could not be written."""
