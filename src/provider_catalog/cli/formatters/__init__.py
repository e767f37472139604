"""CLI formatters package."""

from .json import (
    format_cache_info_json,
    format_json,
    format_local_models_json,
    format_provider_json,
    format_providers_json,
)
from .table import (
    create_console,
    format_cache_info_table,
    format_local_models_table,
    format_models_table,
    format_problems_table,
    format_providers_table,
)
from .yaml_format import format_yaml

__all__ = [
    "format_json",
    "format_yaml",
    "format_providers_json",
    "format_provider_json",
    "format_cache_info_json",
    "format_local_models_json",
    "create_console",
    "format_providers_table",
    "format_models_table",
    "format_cache_info_table",
    "format_local_models_table",
    "format_problems_table",
]
