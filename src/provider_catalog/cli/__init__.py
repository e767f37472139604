"""Provider catalog CLI package."""

# Import guard for CLI dependencies
try:
    from .app import app
except ImportError as e:
    raise ImportError(f"CLI dependencies not available ({e}). Reinstall with: pip install provider-catalog") from e

__all__ = ["app"]
