"""Feed source model."""

from pydantic import BaseModel, Field


class FeedSource(BaseModel):
    """RSS/Atom feed source from the registry."""

    id: str = Field(..., description="Stable feed identifier", min_length=1)
    name: str = Field(..., description="Display name")
    url: str = Field(..., description="Feed URL")
    enabled: bool = Field(True, description="Whether the source is aggregated")

    class Config:
        """Pydantic config."""

        frozen = True
