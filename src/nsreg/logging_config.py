"""Logging setup for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler

_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Route ``nsreg`` loggers to a rich handler on stderr."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter(_FORMAT, "%H:%M:%S"))
    logger = logging.getLogger("nsreg")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
