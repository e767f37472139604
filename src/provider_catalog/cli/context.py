"""Access to objects shared across CLI commands."""

from typing import Any, Callable

import click
from rich.console import Console

from ..registry import ProviderRegistry, RegistryConfig
from .formatters import create_console, format_json, format_yaml


def get_registry(ctx: click.Context) -> ProviderRegistry:
    """Return the registry owned by the root command, creating it on first use.

    Tests may place a prepared registry under ``obj["registry"]``.
    """
    root = ctx.find_root()
    root.ensure_object(dict)
    registry = root.obj.get("registry")
    if registry is None:
        registry = ProviderRegistry(config=RegistryConfig(enable_local_probe=root.obj.get("enable_local_probe")))
        root.obj["registry"] = registry
        # Let a background refresh finish before the process exits
        root.call_on_close(registry.close)
    return registry


def emit(ctx: click.Context, data: Any, render_table: Callable[[Console], None]) -> None:
    """Write command output in the format selected on the root command.

    Args:
        ctx: Click context
        data: JSON-serializable payload for json/yaml output
        render_table: Draws the table view onto a console
    """
    obj = ctx.find_root().obj or {}
    format_type = obj.get("format", "json")
    if format_type == "yaml":
        format_yaml(data)
    elif format_type == "table":
        render_table(create_console(no_color=obj.get("no_color", False)))
    else:
        format_json(data)
