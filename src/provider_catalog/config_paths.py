"""Path and endpoint resolution for the provider catalog.

The provider cache lives in the user's data directory, following the XDG Base
Directory Specification where it applies and the platform convention elsewhere.
"""

import os
from pathlib import Path

import platformdirs

# Application name used for directory paths
APP_NAME = "provider-catalog"

# Environment variable names
ENV_CACHE_PATH = "PROVIDER_CATALOG_CACHE_PATH"
ENV_DISABLE_LOCAL = "PROVIDER_CATALOG_DISABLE_LOCAL"
ENV_XDG_DATA_HOME = "XDG_DATA_HOME"
ENV_CATALOG_URL = "CATWALK_URL"
ENV_OLLAMA_HOST = "OLLAMA_HOST"

# Defaults
DEFAULT_CATALOG_URL = "https://catwalk.charm.sh"
PROVIDER_CACHE_FILENAME = "providers.json"


def get_user_data_dir() -> Path:
    """Get the path to the user's data directory for this application.

    ``XDG_DATA_HOME`` is honored on every platform, not only where platformdirs
    would read it.
    """
    xdg_data_home = os.environ.get(ENV_XDG_DATA_HOME)
    if xdg_data_home:
        return Path(xdg_data_home) / APP_NAME
    return Path(platformdirs.user_data_dir(APP_NAME))


def get_provider_cache_path() -> Path:
    """Get the path to the provider cache file.

    Resolution order:
        1. ``PROVIDER_CATALOG_CACHE_PATH`` environment variable
        2. ``$XDG_DATA_HOME/provider-catalog/providers.json``
        3. platform user data directory

    Returns:
        Path to the provider cache file (it may not exist yet)
    """
    env_path = os.environ.get(ENV_CACHE_PATH)
    if env_path:
        return Path(env_path)
    return get_user_data_dir() / PROVIDER_CACHE_FILENAME


def get_catalog_url() -> str:
    """Get the base URL of the remote provider catalog."""
    return os.environ.get(ENV_CATALOG_URL) or DEFAULT_CATALOG_URL


def is_local_probe_disabled() -> bool:
    """Check whether the local inference probe is turned off by environment."""
    return os.environ.get(ENV_DISABLE_LOCAL, "").lower() in ("1", "true", "yes")
