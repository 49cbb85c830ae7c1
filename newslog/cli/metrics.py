"""Metrics commands."""

import typer
from rich.table import Table

from ..errors import CacheIOError
from ..storage import MetricsRepository
from .common import console, get_config

metrics_app = typer.Typer(help="Inspect per-feed fetch metrics")


@metrics_app.command("show")
def metrics_show(ctx: typer.Context) -> None:
    """Show success and failure counters for every feed."""
    metrics = MetricsRepository(get_config(ctx).metrics_path).all()

    if not metrics:
        console.print("[yellow]No metrics recorded yet.[/yellow]")
        return

    table = Table(title="Feed Metrics")
    table.add_column("ID", style="cyan")
    table.add_column("Success", style="green", justify="right")
    table.add_column("Failure", style="red", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Last success", style="dim")
    table.add_column("Last failure", style="dim")
    table.add_column("HTTP", justify="right")
    table.add_column("Last error", style="red")

    for source_id in sorted(metrics):
        entry = metrics[source_id]
        table.add_row(
            source_id,
            str(entry.success_count),
            str(entry.failure_count),
            str(entry.consecutive_failures),
            entry.last_success or "-",
            entry.last_failure or "-",
            str(entry.last_http_status) if entry.last_http_status is not None else "-",
            entry.last_error or "",
        )

    console.print(table)


@metrics_app.command("reset")
def metrics_reset(
    ctx: typer.Context,
    source_id: str = typer.Argument(..., help="Feed identifier"),
) -> None:
    """Reset the counters of one feed."""
    repo = MetricsRepository(get_config(ctx).metrics_path)
    try:
        found = repo.reset(source_id)
    except CacheIOError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not found:
        console.print(f"[yellow]No metrics recorded for '{source_id}'.[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Reset metrics for {source_id}[/green]")
