"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from ..models import FeedSource
from .models import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "newslog" / "config.yaml"

# Environment variable -> (section, key) in the config document.
ENV_OVERRIDES: Dict[str, Tuple[Optional[str], str]] = {
    "APP_CACHE_TTL": ("cache", "ttl"),
    "APP_CACHE_CLEANUP_MAX_AGE": ("cache", "cleanup_max_age"),
    "APP_HTTP_TIMEOUT": ("http", "timeout"),
    "NEWSLOG_CACHE_DIR": ("cache", "directory"),
    "NEWSLOG_FEEDS_PATH": (None, "feeds_path"),
    "NEWSLOG_METRICS_PATH": (None, "metrics_path"),
}


class Config:
    """Configuration manager."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = Path(os.environ.get("NEWSLOG_CONFIG", DEFAULT_CONFIG_PATH))
        self.config_path = Path(config_path)
        self.environ = os.environ if environ is None else environ
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        """Get loaded config, read once per process."""
        if self._config is None:
            self._config = load_config(self.config_path, self.environ)
        return self._config

    @property
    def cache_dir(self) -> Path:
        """Get cache directory path."""
        return Path(self.config.cache.directory).expanduser()

    @property
    def feeds_path(self) -> Path:
        """Get feed registry path."""
        if self.config.feeds_path:
            return Path(self.config.feeds_path).expanduser()
        return self.config_path.parent / "feeds.yaml"

    @property
    def metrics_path(self) -> Path:
        """Get metrics document path."""
        if self.config.metrics_path:
            return Path(self.config.metrics_path).expanduser()
        return self.cache_dir / "metrics.json"


def apply_env_overrides(
    config_data: Dict[str, Any],
    environ: Mapping[str, str],
) -> Dict[str, Any]:
    """Overlay environment variables on top of the file configuration."""
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value.strip() == "":
            continue

        if section is None:
            config_data[key] = value.strip()
            continue

        target = config_data.get(section)
        if not isinstance(target, dict):
            target = {}
            config_data[section] = target
        target[key] = value.strip()

    return config_data


def load_config(
    config_path: Path,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load configuration from an optional YAML file plus environment overrides."""
    if environ is None:
        environ = os.environ

    config_data: Dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e

        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")
        config_data = loaded or {}

    config_data = apply_env_overrides(config_data, environ)

    try:
        return AppConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def save_config(config: AppConfig, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.model_dump(exclude_none=True), f, default_flow_style=False, sort_keys=False)


def load_feeds(feeds_path: Path) -> List[FeedSource]:
    """Load feed definitions from a YAML (or JSON) registry file."""
    if not feeds_path.exists():
        raise ConfigurationError(f"Feed configuration not found at {feeds_path}")

    try:
        with open(feeds_path, encoding="utf-8") as f:
            feeds_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in feeds file: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read feeds file {feeds_path}: {e}") from e

    if isinstance(feeds_data, dict):
        feeds_data = feeds_data.get("feeds")
    if not isinstance(feeds_data, list):
        raise ConfigurationError("Feed configuration is invalid")

    feeds = []
    seen = set()
    for feed_data in feeds_data:
        if not isinstance(feed_data, dict):
            logger.warning("Skipping malformed feed entry: %r", feed_data)
            continue
        try:
            feed = FeedSource(**feed_data)
        except ValidationError as e:
            logger.warning("Skipping invalid feed %s: %s", feed_data.get("id", "unknown"), e)
            continue
        if feed.id in seen:
            logger.warning("Skipping duplicate feed id %s", feed.id)
            continue
        seen.add(feed.id)
        feeds.append(feed)

    return feeds


def save_feeds(feeds: List[FeedSource], feeds_path: Path) -> None:
    """Save feed definitions to YAML file."""
    feeds_path.parent.mkdir(parents=True, exist_ok=True)

    feeds_data = {"feeds": [f.model_dump() for f in feeds]}

    with open(feeds_path, "w", encoding="utf-8") as f:
        yaml.dump(feeds_data, f, default_flow_style=False, sort_keys=False)
