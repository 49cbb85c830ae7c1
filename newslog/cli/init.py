"""Init command implementation."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.panel import Panel

from ..config import AppConfig, CacheConfig, save_config, save_feeds
from ..models import FeedSource
from .common import console, get_config


def create_default_feeds() -> List[FeedSource]:
    """Create default news feeds."""
    return [
        FeedSource(
            id="bbc-world",
            name="BBC News - World",
            url="https://feeds.bbci.co.uk/news/world/rss.xml",
        ),
        FeedSource(
            id="npr-news",
            name="NPR News",
            url="https://feeds.npr.org/1001/rss.xml",
        ),
        FeedSource(
            id="guardian-world",
            name="The Guardian - World",
            url="https://www.theguardian.com/world/rss",
        ),
        FeedSource(
            id="ars-technica",
            name="Ars Technica",
            url="https://feeds.arstechnica.com/arstechnica/index",
        ),
        FeedSource(
            id="hacker-news",
            name="Hacker News",
            url="https://hnrss.org/frontpage",
            enabled=False,
        ),
    ]


def init_command(
    ctx: typer.Context,
    cache_dir: Optional[Path] = typer.Option(
        None,
        "--cache-dir",
        help="Cache directory (default: ~/.cache/newslog)",
    ),
    seed_feeds: bool = typer.Option(
        True,
        "--seed-feeds/--no-seed-feeds",
        help="Seed the registry with default news feeds",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing files"),
) -> None:
    """Write a default configuration and feed registry."""
    config = get_config(ctx)
    config_path = config.config_path
    feeds_path = config_path.parent / "feeds.yaml"

    if not force and (config_path.exists() or feeds_path.exists()):
        console.print(f"[red]Configuration already exists in {config_path.parent}. Use --force to overwrite.[/red]")
        raise typer.Exit(1)

    app_config = AppConfig()
    if cache_dir is not None:
        app_config = AppConfig(cache=CacheConfig(directory=str(cache_dir)))

    save_config(app_config, config_path)
    console.print(f"✅ Created config: {config_path}")

    feeds = create_default_feeds() if seed_feeds else []
    save_feeds(feeds, feeds_path)
    console.print(f"✅ Created feeds: {feeds_path} ({len(feeds)} feeds)")

    cache_path = Path(app_config.cache.directory).expanduser()
    cache_path.mkdir(parents=True, exist_ok=True)
    console.print(f"✅ Created cache directory: {cache_path}")

    console.print(
        Panel(
            f"[green]newslog initialized[/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Feeds: {feeds_path}\n"
            f"Cache: {cache_path}\n\n"
            f"Next: [bold]newslog page[/bold]",
            style="green",
        )
    )
