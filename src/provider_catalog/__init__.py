"""Catalog of AI model providers for command-line agents.

This package keeps a cached list of model providers fetched from a remote
catalog service, adds models served by a local Ollama server, and refreshes
the on-disk cache in the background.
"""

# Version of the package
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _version

    __version__ = _version("provider-catalog")
except PackageNotFoundError:
    raise ImportError(
        "Failed to determine package version. The provider-catalog package must be installed "
        "(for development: pip install -e .)."
    )

# Import main components for easier access
from .cache import CacheStatus, CacheStore
from .catalog import CatalogClient, CatwalkClient
from .errors import (
    CacheError,
    ConnectError,
    DecodeError,
    HTTPError,
    NetworkError,
    NoModelsError,
    ProviderCatalogError,
    ReadError,
    RegistryInitError,
    WriteError,
)
from .local import LocalProber, RawLocalModel, convert_model, display_name, infer_model_attributes
from .registry import (
    ProviderRegistry,
    ProviderSource,
    RegistryConfig,
    RegistryState,
)
from .schema import Model, Provider, ProviderType, validate_providers

# Define public API
__all__ = [
    # Core registry
    "ProviderRegistry",
    "RegistryConfig",
    "RegistryState",
    "ProviderSource",
    # Components
    "CacheStore",
    "CacheStatus",
    "CatalogClient",
    "CatwalkClient",
    "LocalProber",
    "RawLocalModel",
    "convert_model",
    "display_name",
    "infer_model_attributes",
    # Data model
    "Model",
    "Provider",
    "ProviderType",
    "validate_providers",
    # Errors
    "ProviderCatalogError",
    "NetworkError",
    "ConnectError",
    "HTTPError",
    "DecodeError",
    "CacheError",
    "ReadError",
    "WriteError",
    "NoModelsError",
    "RegistryInitError",
]
