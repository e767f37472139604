"""Local inference server commands."""

from typing import Optional

import click

from ...errors import NoModelsError
from ...local import DEFAULT_PROBE_TIMEOUT, LocalProber
from ...schema import Provider
from ..context import emit
from ..formatters import format_local_models_json, format_local_models_table
from ..utils import handle_error


@click.group()
def local() -> None:
    """Inspect the local Ollama server."""
    pass


@local.command()
@click.option("--host", type=str, help="Server base URL. Defaults to OLLAMA_HOST or http://localhost:11434.")
@click.option("--timeout", type=float, default=DEFAULT_PROBE_TIMEOUT, show_default=True, help="Probe timeout in seconds.")
@click.pass_context
def probe(ctx: click.Context, host: Optional[str] = None, timeout: float = DEFAULT_PROBE_TIMEOUT) -> None:
    """List local models and the defaults the catalog would pick."""
    try:
        prober = LocalProber(base_url=host)
        raw_models = prober.list_models(timeout=timeout)

        provider: Optional[Provider] = prober.make_provider(raw_models) if raw_models else None

        emit(
            ctx,
            format_local_models_json(prober.base_url, raw_models, provider),
            lambda console: format_local_models_table(prober.base_url, raw_models, provider, console),
        )
        if provider is None:
            handle_error(NoModelsError("No models found in local Ollama installation"))
    except Exception as e:
        handle_error(e)
