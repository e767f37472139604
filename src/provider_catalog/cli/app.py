"""Main CLI application for the provider catalog."""

from typing import Optional

import click
import rich_click as rich_click

from ..logging import configure_logging
from .utils import resolve_format, resolve_log_level

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


@click.group()
@click.version_option(package_name="provider-catalog", prog_name="provider-catalog")
@click.option(
    "--format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option("--no-local", is_flag=True, help="Skip probing the local Ollama server.")
@click.pass_context
def app(
    ctx: click.Context,
    format: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
    no_local: bool = False,
) -> None:
    """Provider catalog CLI - inspect cached model providers.

    Lists the providers an agent can use, shows their models, manages the
    on-disk provider cache and probes the local Ollama server.

    Examples:
      # List providers (served from cache when fresh)
      provider-catalog providers list

      # Show the models of one provider
      provider-catalog providers get openai

      # Refetch the catalog now
      provider-catalog cache refresh
    """
    ctx.ensure_object(dict)

    log_level = resolve_log_level(verbose=verbose, quiet=quiet, debug=debug)
    configure_logging(log_level, no_color=no_color)

    ctx.obj.update(
        {
            "format": resolve_format(format),
            "format_explicit": format is not None,
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
            "log_level": log_level,
            "enable_local_probe": False if no_local else None,
        }
    )


# Import and register subcommands (after the group exists to avoid circular imports)
from .commands import cache, local, providers  # noqa: E402

app.add_command(providers.providers)
app.add_command(cache.cache)
app.add_command(local.local)


if __name__ == "__main__":
    app()
