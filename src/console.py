"""Console and logging setup shared by the command line tools."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def configure_logging(verbose: bool = False, target: Console | None = None) -> None:
    """Route standard logging through a single RichHandler.

    Args:
        verbose: Log at DEBUG instead of INFO
        target: Console to write to; defaults to stderr
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)

    rich_handler = RichHandler(
        console=target or console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.addHandler(rich_handler)


__all__ = ["configure_logging", "console"]
