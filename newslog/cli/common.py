"""Shared CLI helpers."""

import typer
from rich.console import Console

from ..config import Config
from ..errors import ConfigurationError
from ..storage import FeedRepository

console = Console()


def get_config(ctx: typer.Context) -> Config:
    """Get the Config created by the app callback."""
    if isinstance(ctx.obj, Config):
        return ctx.obj
    return Config()


def get_feed_repository(ctx: typer.Context) -> FeedRepository:
    config = get_config(ctx)
    try:
        return FeedRepository(config.feeds_path)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
