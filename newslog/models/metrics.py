"""Per-source fetch metrics model."""

from typing import Optional

from pydantic import Field

from .base import NewslogModel


class SourceMetrics(NewslogModel):
    """Success and failure counters for one feed source."""

    id: str = Field(..., description="Source identifier")
    success_count: int = Field(0, ge=0)
    failure_count: int = Field(0, ge=0)
    consecutive_failures: int = Field(0, ge=0)
    last_success: Optional[str] = Field(None, description="ISO-8601 UTC time of last success")
    last_failure: Optional[str] = Field(None, description="ISO-8601 UTC time of last failure")
    last_error: Optional[str] = Field(None, description="Reason of the last recorded failure")
    last_http_status: Optional[int] = Field(None, description="HTTP status of the last fetch")
