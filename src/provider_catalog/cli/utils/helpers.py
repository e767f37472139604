"""Helper functions for CLI operations."""

import sys
from typing import Optional

import click

from ...errors import CacheError, DecodeError, NetworkError, NoModelsError, RegistryInitError


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    NOT_FOUND = 3
    DATA_SOURCE_ERROR = 4


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    # Auto-detect based on TTY
    if sys.stdout.isatty():
        return default_tty
    else:
        return default_non_tty


def resolve_log_level(verbose: int = 0, quiet: int = 0, debug: bool = False) -> str:
    """Map verbosity flags to a logging level name."""
    if debug:
        return "DEBUG"
    if verbose > quiet:
        return "DEBUG" if verbose - quiet >= 2 else "INFO"
    if quiet > verbose:
        return "CRITICAL" if quiet - verbose >= 2 else "ERROR"
    return "WARNING"


def exit_code_for(error: Exception) -> int:
    """Pick the exit code that matches an exception."""
    if isinstance(error, click.BadParameter):
        return ExitCode.INVALID_USAGE
    if isinstance(error, (RegistryInitError, NetworkError, DecodeError, CacheError, NoModelsError)):
        return ExitCode.DATA_SOURCE_ERROR
    return ExitCode.GENERIC_ERROR


def handle_error(error: Exception, exit_code: Optional[int] = None) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use; derived from the exception type if None
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code if exit_code is not None else exit_code_for(error))


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable size string
    """
    if size_bytes == 0:
        return "0 B"

    size = float(size_bytes)
    size_names = ["B", "KB", "MB", "GB"]
    i = 0
    while size >= 1024 and i < len(size_names) - 1:
        size /= 1024.0
        i += 1

    return f"{size:.1f} {size_names[i]}"


def format_age(seconds: Optional[float]) -> str:
    """Format an age in seconds as ``2h 5m`` style text."""
    if seconds is None:
        return "N/A"
    seconds = max(0, int(seconds))
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    if days:
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
