"""Provider cache management commands."""

from typing import Optional

import click

from ...errors import DecodeError, ReadError
from ..context import emit, get_registry
from ..formatters import create_console, format_cache_info_json, format_cache_info_table
from ..utils import handle_error


@click.group()
def cache() -> None:
    """Manage the provider cache file."""
    pass


@cache.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show the cache file location, freshness and contents."""
    try:
        store = get_registry(ctx).cache
        status = store.status()

        provider_count: Optional[int] = None
        if status.exists:
            try:
                provider_count = len(store.load())
            except (ReadError, DecodeError):
                provider_count = None

        emit(
            ctx,
            format_cache_info_json(status, provider_count),
            lambda console: format_cache_info_table(status, provider_count, console),
        )
    except Exception as e:
        handle_error(e)


@cache.command()
@click.option("--yes", is_flag=True, help="Confirm deletion without prompting (required for non-interactive use).")
@click.pass_context
def clear(ctx: click.Context, yes: bool = False) -> None:
    """Delete the cached provider list.

    The next run fetches the catalog live and writes a new cache file.
    """
    try:
        store = get_registry(ctx).cache
        obj = ctx.find_root().obj

        if not yes:
            if not store.status().exists:
                click.echo("No cache file found to clear.")
                return
            if not click.confirm(f"Delete provider cache {store.path}?"):
                click.echo("Cache clear cancelled.")
                return

        removed = store.clear()

        if obj["format"] in ("json", "yaml"):
            emit(ctx, {"success": True, "removed": removed, "cache_path": str(store.path)}, lambda console: None)
        else:
            console = create_console(no_color=obj["no_color"])
            if removed:
                console.print(f"✅ [green]Removed provider cache[/green] {store.path}")
            else:
                console.print("ℹ️  No cache file was found to clear.")
    except Exception as e:
        handle_error(e)


@cache.command()
@click.pass_context
def refresh(ctx: click.Context) -> None:
    """Fetch the catalog now and overwrite the cache file."""
    try:
        registry = get_registry(ctx)
        providers = registry.refresh_cache()
        status = registry.cache.status()

        emit(
            ctx,
            {
                "success": True,
                "cache_path": str(status.path),
                "provider_count": len(providers),
                "providers": [p.id for p in providers],
            },
            lambda console: format_cache_info_table(status, len(providers), console),
        )
    except Exception as e:
        handle_error(e)
