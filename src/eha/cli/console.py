"""CLI console and logging helpers with optional Rich support.

This module avoids module-level imports of Rich so bootstrap paths
(``--help``, ``--version``) keep working when it is not installed.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from eha.exceptions import EhaError

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EhaError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EhaError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console()
        except EhaError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()


def escape(text: object) -> str:
    """Escape Rich markup in *text*; plain text when Rich is missing."""
    try:
        from rich.markup import escape as rich_escape
    except ModuleNotFoundError:
        return str(text)
    return rich_escape(str(text))


def configure_logging(level: str) -> None:
    """Send ``eha`` log records to stderr at *level*.

    Uses ``rich.logging.RichHandler`` when Rich is importable and a plain
    ``StreamHandler`` otherwise.  Calling it again replaces the handler.
    """
    logger = logging.getLogger("eha")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler: logging.Handler
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    else:
        handler = RichHandler(console=get_rich_console(), show_path=False)

    handler.setLevel(level)
    logger.addHandler(handler)
