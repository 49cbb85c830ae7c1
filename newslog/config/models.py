"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = "newslog/1.0 (RSS/Atom headline aggregator)"


class CacheConfig(BaseModel):
    """File cache configuration."""

    directory: str = Field("~/.cache/newslog", description="Directory for cache files")
    ttl: int = Field(1800, description="Cache validity window in seconds", ge=1)
    cleanup_max_age: int = Field(
        604800,
        description="Cache files older than this are deleted (seconds)",
        ge=1,
    )


class HttpConfig(BaseModel):
    """Outbound HTTP configuration."""

    timeout: float = Field(10.0, description="Per-request timeout in seconds", gt=0)
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header")
    max_concurrent: Optional[int] = Field(
        None,
        description="Concurrent request cap (default: one per source)",
        ge=1,
    )


class AppConfig(BaseModel):
    """Main configuration model."""

    cache: CacheConfig = Field(default_factory=CacheConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    feeds_path: Optional[str] = Field(
        None,
        description="Feed registry file (default: feeds.yaml next to config.yaml)",
    )
    metrics_path: Optional[str] = Field(
        None,
        description="Metrics document (default: metrics.json in the cache directory)",
    )
