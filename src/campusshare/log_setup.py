"""Logging setup for the command line entry point.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are installed here, once, by the CLI.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> None:
    """Route campusshare log records through a Rich handler.

    Args:
        level: Log level name
        console: Console to render to (defaults to stderr)
    """
    global _configured

    root = logging.getLogger("campusshare")
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    _configured = True
