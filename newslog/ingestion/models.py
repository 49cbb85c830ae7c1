"""Data models for ingestion."""

from typing import Optional

from pydantic import BaseModel, Field

from ..errors import ProtocolError, TransportError


class FetchResponse(BaseModel):
    """Outcome of fetching one feed URL."""

    source_id: str = Field(..., description="Source identifier")
    content: bytes = Field(b"", description="Response body")
    http_status: int = Field(0, description="HTTP status code, 0 when no response")
    transport_error: Optional[str] = Field(None, description="Network failure message")

    @property
    def ok(self) -> bool:
        return self.transport_error is None and 0 < self.http_status < 400 and bool(self.content)

    def raise_for_failure(self) -> None:
        """Raise the error matching an unusable response."""
        if self.transport_error is not None:
            raise TransportError(self.transport_error)
        if self.http_status >= 400 or self.http_status == 0:
            raise ProtocolError(f"HTTP {self.http_status}", http_status=self.http_status)
        if not self.content:
            raise ProtocolError("Empty response", http_status=self.http_status)
