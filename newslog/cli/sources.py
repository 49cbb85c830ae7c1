"""Feed registry management commands."""

from typing import Optional

import typer
from rich.table import Table

from ..errors import ConfigurationError, NewslogError
from ..ingestion import FeedClient, parse_feed
from ..storage import MetricsRepository
from .common import console, get_config, get_feed_repository

sources_app = typer.Typer(help="Manage feed sources")


@sources_app.command("list")
def sources_list(ctx: typer.Context) -> None:
    """List all configured feeds with their fetch health."""
    config = get_config(ctx)
    repo = get_feed_repository(ctx)

    try:
        feeds = repo.all_with_meta()
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    metrics = MetricsRepository(config.metrics_path).all()

    table = Table(title="Configured Feeds")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="magenta")
    table.add_column("Enabled", style="yellow")
    table.add_column("OK / Failed", style="green")
    table.add_column("Last error", style="red")
    table.add_column("URL", style="blue")

    for feed in feeds:
        entry = metrics.get(feed.id)
        health = f"{entry.success_count} / {entry.failure_count}" if entry else "-"
        table.add_row(
            feed.id,
            feed.name,
            "✓" if feed.enabled else "✗",
            health,
            (entry.last_error or "") if entry else "",
            feed.url,
        )

    console.print(table)


@sources_app.command("add")
def sources_add(
    ctx: typer.Context,
    feed_id: str = typer.Option(..., "--id", help="Feed identifier"),
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS/Atom feed URL"),
    enabled: bool = typer.Option(True, "--enabled/--disabled", help="Aggregate this feed"),
) -> None:
    """Add a new feed."""
    repo = get_feed_repository(ctx)
    try:
        repo.add(feed_id, name, url, enabled)
    except (ValueError, ConfigurationError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Added feed: {feed_id}[/green]")


def _set_enabled(ctx: typer.Context, feed_id: str, enabled: bool) -> None:
    repo = get_feed_repository(ctx)
    try:
        repo.set_enabled(feed_id, enabled)
    except (ValueError, ConfigurationError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    state = "enabled" if enabled else "disabled"
    console.print(f"[green]Feed '{feed_id}' is now {state}.[/green]")


@sources_app.command("enable")
def sources_enable(
    ctx: typer.Context,
    feed_id: str = typer.Argument(..., help="Feed identifier"),
) -> None:
    """Enable a feed."""
    _set_enabled(ctx, feed_id, True)


@sources_app.command("disable")
def sources_disable(
    ctx: typer.Context,
    feed_id: str = typer.Argument(..., help="Feed identifier"),
) -> None:
    """Disable a feed."""
    _set_enabled(ctx, feed_id, False)


@sources_app.command("update")
def sources_update(
    ctx: typer.Context,
    feed_id: str = typer.Argument(..., help="Feed identifier"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New display name"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="New feed URL"),
) -> None:
    """Change a feed's name or URL."""
    if not name and not url:
        console.print("[yellow]Nothing to update. Pass --name and/or --url.[/yellow]")
        raise typer.Exit(1)

    repo = get_feed_repository(ctx)
    try:
        repo.update(feed_id, name=name, url=url)
    except (ValueError, ConfigurationError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Updated feed: {feed_id}[/green]")


@sources_app.command("remove")
def sources_remove(
    ctx: typer.Context,
    feed_id: str = typer.Argument(..., help="Feed identifier to remove"),
) -> None:
    """Remove a feed."""
    repo = get_feed_repository(ctx)
    try:
        repo.remove(feed_id)
    except (ValueError, ConfigurationError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Removed feed: {feed_id}[/green]")


@sources_app.command("test")
def sources_test(
    ctx: typer.Context,
    feed_id: Optional[str] = typer.Argument(None, help="Feed to test (default: all enabled)"),
) -> None:
    """Fetch and parse feeds without touching the cache or metrics."""
    config = get_config(ctx)
    repo = get_feed_repository(ctx)

    try:
        feeds = {feed.id: feed for feed in repo.all_with_meta()}
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if feed_id:
        if feed_id not in feeds:
            console.print(f"[red]Feed '{feed_id}' not found.[/red]")
            raise typer.Exit(1)
        feeds = {feed_id: feeds[feed_id]}
    else:
        feeds = {fid: feed for fid, feed in feeds.items() if feed.enabled}

    http = config.config.http
    client = FeedClient(timeout=http.timeout, user_agent=http.user_agent)
    responses = client.fetch(feeds)

    failed = 0
    for fid, response in responses.items():
        feed = feeds[fid]
        try:
            response.raise_for_failure()
            items = parse_feed(response.content, feed)
        except NewslogError as e:
            failed += 1
            console.print(f"[red]❌ {feed.name}: {e}[/red]")
            continue

        if not items:
            failed += 1
            console.print(f"[yellow]⚠️  {feed.name}: no items ({response.http_status})[/yellow]")
        else:
            console.print(f"[green]✅ {feed.name}: {len(items)} items ({response.http_status})[/green]")

    if failed:
        raise typer.Exit(1)
