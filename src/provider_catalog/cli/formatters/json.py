"""JSON output formatter for CLI."""

import datetime as _dt
import json
import sys
from enum import Enum as _Enum
from typing import Any, Dict, List, Optional, Sequence, TextIO

from ...cache import CacheStatus
from ...local import RawLocalModel, infer_model_attributes
from ...schema import Provider


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - datetime/date -> ISO 8601 string
    - Enum -> value (fallback to name)
    - Fallback -> str(obj)
    """
    if isinstance(obj, (_dt.datetime, _dt.date)):
        return obj.isoformat()
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def _provider_summary(provider: Provider) -> Dict[str, Any]:
    return {
        "id": provider.id,
        "name": provider.name,
        "type": provider.type_name,
        "api_endpoint": provider.api_endpoint,
        "model_count": len(provider.models),
        "default_large_model_id": provider.default_large_model_id,
        "default_small_model_id": provider.default_small_model_id,
    }


def format_providers_json(providers: Sequence[Provider], source: Optional[str] = None) -> Dict[str, Any]:
    """Format the provider list for JSON output.

    Args:
        providers: Providers in registry order
        source: Where the list came from

    Returns:
        Formatted data structure
    """
    return {
        "providers": [_provider_summary(p) for p in providers],
        "count": len(providers),
        "source": source,
    }


def format_provider_json(provider: Provider) -> Dict[str, Any]:
    """Format a single provider, including its models, for JSON output."""
    return provider.to_dict()


def format_cache_info_json(status: CacheStatus, provider_count: Optional[int] = None) -> Dict[str, Any]:
    """Format cache information for JSON output.

    Args:
        status: Cache file status
        provider_count: Number of providers in the file, if it could be read

    Returns:
        Formatted data structure
    """
    return {
        "cache_path": str(status.path),
        "exists": status.exists,
        "stale": status.stale,
        "modified": status.modified,
        "size_bytes": status.size,
        "age_seconds": int(status.age) if status.age is not None else None,
        "provider_count": provider_count,
    }


def format_local_models_json(
    base_url: str, models: Sequence[RawLocalModel], provider: Optional[Provider] = None
) -> Dict[str, Any]:
    """Format a local server probe for JSON output.

    Args:
        base_url: Server that was probed
        models: Raw model descriptors
        provider: Provider built from the models, if any

    Returns:
        Formatted data structure
    """
    entries: List[Dict[str, Any]] = []
    for raw in models:
        attributes = infer_model_attributes(raw.name)
        entries.append(
            {
                "name": raw.name,
                "size": raw.size,
                "family": raw.details.family,
                "parameter_size": raw.details.parameter_size,
                "context_window": attributes.context_window,
                "default_max_tokens": attributes.default_max_tokens,
                "supports_images": attributes.supports_images,
            }
        )
    return {
        "base_url": base_url,
        "models": entries,
        "count": len(entries),
        "default_large_model_id": provider.default_large_model_id if provider else None,
        "default_small_model_id": provider.default_small_model_id if provider else None,
    }
