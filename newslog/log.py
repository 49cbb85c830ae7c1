"""Logging setup for the command line."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(debug: bool = False, console: Optional[Console] = None) -> None:
    """Route ``newslog`` loggers to a rich handler on stderr."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger("newslog")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
