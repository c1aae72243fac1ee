"""
Exception hierarchy and CLI error reporting for PDV.

Parameter lookups that find nothing, or too much, are not errors: the
resolver returns them as outcomes. Only failures that stop a single
operation are raised.
"""
from __future__ import annotations

import click
from rich.markup import escape

from .console import err_console as console


class PDVError(Exception):
    """Base class for all PDV failures."""


class CommandNotFound(PDVError, LookupError):
    """The command host could not resolve a command reference."""

    def __init__(self, command: str, reason: str | None = None):
        self.command = command
        message = f"Command not found: {command}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class StoreLoadMissing(PDVError, FileNotFoundError):
    """A persisted override file does not exist."""

    def __init__(self, locator: str):
        self.locator = locator
        super().__init__(f"No stored defaults at {locator}")


class StoreFormatError(PDVError, ValueError):
    """A persisted override file exists but does not hold a mapping."""


class StoreWriteError(PDVError, OSError):
    """Writing the override file failed."""


def handle_error(e: Exception, command_name: str, quiet: bool) -> None:
    """Print a user-facing error for a failed command and abort it."""
    if isinstance(e, (click.ClickException, click.exceptions.Exit, click.exceptions.Abort)):
        # Click reports these itself.
        raise e
    if not quiet:
        console.print(f"[error]Error during '{command_name}' command:[/error]")
        if isinstance(e, CommandNotFound):
            console.print(f"  [error]Unknown command:[/error] {escape(e.command)}")
        elif isinstance(e, FileNotFoundError):
            console.print(f"  [error]File not found:[/error] {escape(str(e))}")
        elif isinstance(e, (ValueError, OSError)):
            console.print(f"  [error]Input/Output Error:[/error] {escape(str(e))}")
        else:
            console.print(f"  [error]An unexpected error occurred:[/error] {escape(str(e))}")
    raise click.exceptions.Exit(1) from e
