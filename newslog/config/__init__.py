"""Configuration management for newslog."""

from .loader import Config, load_config, load_feeds, save_config, save_feeds
from .models import AppConfig, CacheConfig, HttpConfig

__all__ = [
    "AppConfig",
    "CacheConfig",
    "Config",
    "HttpConfig",
    "load_config",
    "load_feeds",
    "save_config",
    "save_feeds",
]
