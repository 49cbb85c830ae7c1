"""Feed item models."""

from typing import List

from pydantic import Field, field_validator

from .base import NewslogModel


class SourceRef(NewslogModel):
    """Source reference attached to an aggregated item."""

    id: str
    name: str


class FeedItem(NewslogModel):
    """Normalized item parsed from a single feed document."""

    title: str = Field(..., description="Cleaned headline")
    link: str = Field(..., description="Article URL")
    pub_date: str = Field("", alias="pubDate", description="Date string as published")
    timestamp: int = Field(..., description="Publication time in epoch seconds")
    source_id: str = Field(..., alias="sourceId")
    source_name: str = Field(..., alias="sourceName")

    def source_ref(self) -> SourceRef:
        return SourceRef(id=self.source_id, name=self.source_name)


class AggregatedItem(FeedItem):
    """Story merged from one or more feeds."""

    sources: List[SourceRef] = Field(..., min_length=1)

    @field_validator("sources")
    @classmethod
    def unique_sources(cls, v: List[SourceRef]) -> List[SourceRef]:
        """Drop repeated source ids, keeping first-seen order."""
        seen = set()
        unique = []
        for ref in v:
            if ref.id in seen:
                continue
            seen.add(ref.id)
            unique.append(ref)
        return unique

    @classmethod
    def from_item(cls, item: FeedItem) -> "AggregatedItem":
        """Seed an aggregate from the first occurrence of a story."""
        if isinstance(item, AggregatedItem):
            return item.model_copy(update={"sources": list(item.sources)})
        return cls(
            title=item.title,
            link=item.link,
            pub_date=item.pub_date,
            timestamp=item.timestamp,
            source_id=item.source_id,
            source_name=item.source_name,
            sources=[item.source_ref()],
        )

    def has_source(self, source_id: str) -> bool:
        return any(ref.id == source_id for ref in self.sources)
