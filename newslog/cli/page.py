"""Page command implementation."""

import json

import typer
from rich.table import Table

from ..errors import ConfigurationError
from ..models import ErrorResult, PageQuery
from ..pipeline import FeedAggregator
from ..support import relative_to_now
from .common import console, get_config


def page_command(
    ctx: typer.Context,
    offset: int = typer.Option(0, "--offset", "-o", help="Number of items to skip"),
    limit: int = typer.Option(10, "--limit", "-l", help="Items per page (1-50)"),
    total: bool = typer.Option(False, "--total", help="Include the total item count"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result"),
) -> None:
    """Aggregate all enabled feeds and print one page of headlines."""
    try:
        aggregator = FeedAggregator.from_config(get_config(ctx))
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    result = aggregator.get_page(PageQuery(offset=offset, limit=limit, include_total=total))

    if as_json:
        typer.echo(json.dumps(result.to_dict()))
    elif isinstance(result, ErrorResult):
        console.print(f"[red]{result.error}[/red]")
    else:
        table = Table(title=f"Headlines {result.offset + 1}-{result.offset + len(result.items)}")
        table.add_column("Published", style="yellow", no_wrap=True)
        table.add_column("Title", style="bold")
        table.add_column("Sources", style="cyan")
        table.add_column("Link", style="blue")

        for item in result.items:
            table.add_row(
                relative_to_now(item.timestamp),
                item.title,
                ", ".join(ref.name for ref in item.sources),
                item.link,
            )

        console.print(table)
        footer = f"Updated {relative_to_now(result.timestamp).lower()}"
        if result.total_count is not None:
            footer += f" • {result.total_count} items total"
        if result.has_more:
            footer += f" • next page: --offset {result.offset + result.limit}"
        console.print(f"[dim]{footer}[/dim]")

    if isinstance(result, ErrorResult):
        raise typer.Exit(1)
