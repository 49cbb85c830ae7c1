"""Cache maintenance commands."""

from typing import Optional

import typer

from ..storage import CacheRepository
from .common import console, get_config

cache_app = typer.Typer(help="Maintain the feed cache")


def _repository(ctx: typer.Context) -> CacheRepository:
    config = get_config(ctx)
    return CacheRepository(config.cache_dir, preserve=(config.metrics_path.name,))


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Delete every cached feed file. Metrics are kept."""
    removed = _repository(ctx).clear()
    console.print(f"Removed {removed} cache files")


@cache_app.command("cleanup")
def cache_cleanup(
    ctx: typer.Context,
    max_age: Optional[int] = typer.Option(
        None,
        "--max-age",
        help="Delete files older than this many seconds (default from config)",
        min=1,
    ),
) -> None:
    """Delete cache files older than the cleanup age."""
    config = get_config(ctx)
    if max_age is None:
        max_age = config.config.cache.cleanup_max_age

    removed = _repository(ctx).cleanup(max_age)
    console.print(f"Removed {removed} stale cache files")
