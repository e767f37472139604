"""Provider inspection commands."""

import click

from ...schema import validate_providers
from ..context import emit, get_registry
from ..formatters import (
    format_models_table,
    format_problems_table,
    format_provider_json,
    format_providers_json,
    format_providers_table,
)
from ..utils import ExitCode, handle_error


@click.group()
def providers() -> None:
    """List and inspect providers."""
    pass


@providers.command(name="list")
@click.pass_context
def list_providers(ctx: click.Context) -> None:
    """List all available providers."""
    try:
        registry = get_registry(ctx)
        available = registry.get()
        source = registry.source.value if registry.source else None

        emit(
            ctx,
            format_providers_json(available, source),
            lambda console: format_providers_table(available, source, console),
        )
    except Exception as e:
        handle_error(e)


@providers.command()
@click.argument("provider_id")
@click.pass_context
def get(ctx: click.Context, provider_id: str) -> None:
    """Show a provider and its models."""
    try:
        registry = get_registry(ctx)
        provider = registry.find_provider(provider_id)
        if provider is None:
            known = ", ".join(p.id for p in registry.get())
            handle_error(
                click.BadParameter(f"Provider '{provider_id}' not found. Available: {known}"),
                ExitCode.NOT_FOUND,
            )
            return

        emit(
            ctx,
            format_provider_json(provider),
            lambda console: format_models_table(provider, console),
        )
    except Exception as e:
        handle_error(e)


@providers.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check the provider list for duplicate IDs and dangling defaults."""
    try:
        problems = validate_providers(get_registry(ctx).get())
        emit(
            ctx,
            {"valid": not problems, "problems": problems},
            lambda console: format_problems_table(problems, console),
        )
    except Exception as e:
        handle_error(e)
        return

    if problems:
        ctx.exit(ExitCode.DATA_SOURCE_ERROR)
