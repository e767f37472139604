"""Rich table formatter for CLI output."""

import sys
from typing import List, Optional, Sequence, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...cache import CacheStatus
from ...local import RawLocalModel, infer_model_attributes
from ...schema import Provider
from ..utils import format_age, format_file_size


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    # Let Rich use the actual terminal width to avoid truncating headers
    return Console(file=output, no_color=no_color)


def _format_cost(value: float) -> str:
    if value == 0:
        return "free"
    return f"${value:.2f}"


def format_providers_table(
    providers: Sequence[Provider], source: Optional[str] = None, console: Optional[Console] = None
) -> None:
    """Format providers as a Rich table.

    Args:
        providers: Providers in registry order
        source: Where the list came from
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    title = "Available Providers" if not source else f"Available Providers ({source.replace('_', ' ')})"
    table = Table(title=title, show_header=True, header_style="bold magenta")

    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type", style="yellow")
    table.add_column("Models", justify="right")
    table.add_column("Default Large", style="dim")
    table.add_column("Default Small", style="dim")

    for provider in providers:
        table.add_row(
            provider.id,
            provider.name,
            provider.type_name,
            str(len(provider.models)),
            provider.default_large_model_id or "-",
            provider.default_small_model_id or "-",
        )

    console.print(table)


def format_models_table(provider: Provider, console: Optional[Console] = None) -> None:
    """Format a provider's models as a Rich table.

    Args:
        provider: Provider whose models to show
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    console.print(f"[bold]Provider:[/bold] {provider.name} ({provider.id})")
    console.print(f"[bold]Type:[/bold] {provider.type_name}")
    console.print(f"[bold]Endpoint:[/bold] {provider.api_endpoint or 'N/A'}")
    console.print()

    table = Table(title="Models", show_header=True, header_style="bold magenta")

    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Context", justify="right")
    table.add_column("Max Tokens", justify="right")
    table.add_column("Images", justify="center")
    table.add_column("Input $/1M", justify="right")
    table.add_column("Output $/1M", justify="right")
    table.add_column("Default", justify="center")

    for model in provider.models:
        defaults: List[str] = []
        if model.id == provider.default_large_model_id:
            defaults.append("large")
        if model.id == provider.default_small_model_id:
            defaults.append("small")

        table.add_row(
            model.id,
            model.name,
            f"{model.context_window:,}",
            f"{model.default_max_tokens:,}",
            Text("✓", style="green") if model.supports_images else Text("-", style="dim"),
            _format_cost(model.cost_per_1m_in),
            _format_cost(model.cost_per_1m_out),
            ", ".join(defaults),
        )

    console.print(table)


def format_cache_info_table(
    status: CacheStatus, provider_count: Optional[int] = None, console: Optional[Console] = None
) -> None:
    """Format cache information as a Rich table.

    Args:
        status: Cache file status
        provider_count: Number of providers in the file, if it could be read
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    console.print(f"[bold]Cache File:[/bold] {status.path}")
    if not status.exists:
        console.print("[dim]No cache file found[/dim]")
        return

    table = Table(title="Provider Cache", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    freshness = Text("stale", style="yellow") if status.stale else Text("fresh", style="green")
    table.add_row("Status", freshness)
    table.add_row("Modified", status.modified.strftime("%Y-%m-%d %H:%M:%S") if status.modified else "N/A")
    table.add_row("Age", format_age(status.age))
    table.add_row("Size", format_file_size(status.size))
    table.add_row("Providers", str(provider_count) if provider_count is not None else "unreadable")

    console.print(table)


def format_local_models_table(
    base_url: str,
    models: Sequence[RawLocalModel],
    provider: Optional[Provider] = None,
    console: Optional[Console] = None,
) -> None:
    """Format a local server probe as a Rich table.

    Args:
        base_url: Server that was probed
        models: Raw model descriptors
        provider: Provider built from the models, if any
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    console.print(f"[bold]Server:[/bold] {base_url}")
    if not models:
        console.print("[dim]No local models installed[/dim]")
        return

    table = Table(title="Local Models", show_header=True, header_style="bold magenta")

    table.add_column("Name", style="cyan")
    table.add_column("Family")
    table.add_column("Parameters", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Context", justify="right")
    table.add_column("Images", justify="center")

    for raw in models:
        attributes = infer_model_attributes(raw.name)
        table.add_row(
            raw.name,
            raw.details.family or "-",
            raw.details.parameter_size or "-",
            format_file_size(raw.size),
            f"{attributes.context_window:,}",
            Text("✓", style="green") if attributes.supports_images else Text("-", style="dim"),
        )

    console.print(table)
    if provider is not None:
        console.print(f"[bold]Default large:[/bold] {provider.default_large_model_id}")
        console.print(f"[bold]Default small:[/bold] {provider.default_small_model_id}")


def format_problems_table(problems: Sequence[str], console: Optional[Console] = None) -> None:
    """Format provider list problems.

    Args:
        problems: Problems reported by validation
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    if not problems:
        console.print("✅ [green]Provider list is consistent[/green]")
        return

    table = Table(title="Provider List Problems", show_header=True, header_style="bold red")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Problem")
    for index, problem in enumerate(problems, start=1):
        table.add_row(str(index), problem)
    console.print(table)
