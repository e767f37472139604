"""Error types for the provider catalog.

This module defines the error types raised by the catalog client, the local
inference prober, the cache store and the provider registry.
"""

from typing import List, Optional


class ProviderCatalogError(Exception):
    """Base class for all provider catalog errors.

    This is the parent class for all catalog-specific exceptions.
    """

    def __init__(self, message: str) -> None:
        """Initialize catalog error.

        Args:
            message: Error message
        """
        super().__init__(message)
        self.message = message


class NetworkError(ProviderCatalogError):
    """Base class for errors talking to a remote endpoint.

    Examples:
        >>> try:
        ...     client.get_providers()
        ... except NetworkError as e:
        ...     print(f"Request to {e.url} failed: {e}")
    """

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        """Initialize network error.

        Args:
            message: Error message
            url: Optional URL that was being accessed
        """
        super().__init__(message)
        self.url = url


class ConnectError(NetworkError):
    """Raised when an endpoint cannot be reached or does not answer in time."""

    pass


class HTTPError(NetworkError):
    """Raised when an endpoint answers with a non-success status code.

    Examples:
        >>> try:
        ...     prober.list_models()
        ... except HTTPError as e:
        ...     print(f"Local server returned {e.status_code}")
    """

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        """Initialize HTTP error.

        Args:
            message: Error message
            url: URL that returned the status
            status_code: HTTP status code of the response
        """
        super().__init__(message, url)
        self.status_code = status_code


class DecodeError(ProviderCatalogError):
    """Raised when a payload is not valid JSON or does not fit the provider schema."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        """Initialize decode error.

        Args:
            message: Error message
            source: URL or file path the payload came from
        """
        super().__init__(message)
        self.source = source


class CacheError(ProviderCatalogError):
    """Base class for provider cache file errors."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize cache error.

        Args:
            message: Error message
            path: Path to the cache file
        """
        super().__init__(message)
        self.path = path


class ReadError(CacheError):
    """Raised when the cache file exists but cannot be read."""

    pass


class WriteError(CacheError):
    """Raised when the cache file or its directory cannot be written."""

    pass


class NoModelsError(ProviderCatalogError):
    """Raised when the local inference server answers but lists no models."""

    pass


class RegistryInitError(ProviderCatalogError):
    """Raised when no data source produced a usable provider list.

    The registry raises the same instance to every caller once it has
    failed, so ``causes`` reflects the single initialization attempt.

    Examples:
        >>> try:
        ...     registry.get()
        ... except RegistryInitError as e:
        ...     for cause in e.causes:
        ...         print(cause)
    """

    def __init__(self, message: str, causes: Optional[List[Exception]] = None) -> None:
        """Initialize registry initialization error.

        Args:
            message: Error message
            causes: Errors collected from each data source that was tried
        """
        super().__init__(message)
        self.causes: List[Exception] = list(causes) if causes else []

    def __str__(self) -> str:
        """Return the message followed by the collected causes."""
        if not self.causes:
            return self.message
        details = "; ".join(str(cause) for cause in self.causes)
        return f"{self.message} ({details})"
