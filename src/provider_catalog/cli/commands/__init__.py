"""CLI commands package."""

# Import all command modules to make them available
from . import cache, local, providers

__all__ = ["providers", "cache", "local"]
