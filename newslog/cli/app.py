"""Main CLI application."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from ..config import Config
from ..log import setup_logging
from .cache import cache_app
from .init import init_command
from .metrics import metrics_app
from .page import page_command
from .sources import sources_app

app = typer.Typer(
    name="newslog",
    help="newslog - RSS/Atom headline aggregator",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="NEWSLOG_CONFIG",
        help="Config file (default: ~/.config/newslog/config.yaml)",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Aggregate, cache and page through headlines from many feeds."""
    setup_logging(debug)
    ctx.obj = Config(config_path)


# Register commands
app.command("init")(init_command)
app.command("page")(page_command)
app.add_typer(sources_app, name="sources", help="Manage feed sources")
app.add_typer(metrics_app, name="metrics", help="Inspect per-feed fetch metrics")
app.add_typer(cache_app, name="cache", help="Maintain the feed cache")


if __name__ == "__main__":
    app()
