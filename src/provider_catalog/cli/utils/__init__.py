"""CLI utilities package."""

from .helpers import (
    ExitCode,
    exit_code_for,
    format_age,
    format_file_size,
    handle_error,
    resolve_format,
    resolve_log_level,
)

__all__ = [
    "ExitCode",
    "exit_code_for",
    "resolve_format",
    "resolve_log_level",
    "handle_error",
    "format_file_size",
    "format_age",
]
