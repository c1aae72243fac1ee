"""Shared rich console, output verbosity and the default warning sink."""
from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

logger = logging.getLogger(__name__)

# Define a custom theme for consistent styling
custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "dim blue",
    "command": "bold magenta",
})
console = Console(theme=custom_theme)
err_console = Console(theme=custom_theme, stderr=True)

_quiet = False


def set_quiet(quiet: bool) -> None:
    """In quiet mode only errors reach the console."""
    global _quiet
    _quiet = quiet


def info(message: str) -> None:
    if not _quiet:
        console.print(message)


def warn(message: str) -> None:
    """Default warning sink: log it and show it to the user. Never raises."""
    logger.warning(message)
    if not _quiet:
        err_console.print(f"[warning]WARNING:[/warning] {escape(message)}", highlight=False)
