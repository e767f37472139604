"""Client for the remote provider catalog service."""

from typing import List, Optional, Protocol, runtime_checkable

import requests

from .config_paths import get_catalog_url
from .errors import ConnectError, DecodeError, HTTPError, NetworkError
from .logging import LogEvent, log_debug
from .schema import Provider, providers_from_json

DEFAULT_CATALOG_TIMEOUT = 10.0


@runtime_checkable
class CatalogClient(Protocol):
    """Anything that can fetch the current provider list."""

    def get_providers(self) -> List[Provider]:
        """Fetch the current provider list.

        Raises:
            ProviderCatalogError: If the list cannot be obtained
        """
        ...


class CatwalkClient:
    """HTTP client for a catwalk-compatible catalog service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_CATALOG_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Catalog base URL. If None, ``CATWALK_URL`` or the default
                      catalog URL is used.
            timeout: Request timeout in seconds
            session: Optional requests session to issue requests through
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.base_url = (base_url or get_catalog_url()).rstrip("/")
        self.timeout = timeout
        self._session = session

    @property
    def providers_url(self) -> str:
        """URL of the provider listing endpoint."""
        return f"{self.base_url}/providers"

    def get_providers(self) -> List[Provider]:
        """Fetch the current provider list from the catalog.

        Returns:
            Providers in catalog order

        Raises:
            ConnectError: If the catalog cannot be reached in time
            HTTPError: If the catalog answers with a non-success status
            DecodeError: If the response is not a valid provider list
        """
        url = self.providers_url
        log_debug(LogEvent.CATALOG_FETCH, "Fetching provider catalog", url=url)

        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(url, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ConnectError(f"Failed to connect to provider catalog: {e}", url=url) from e
        except requests.RequestException as e:
            raise NetworkError(f"Provider catalog request failed: {e}", url=url) from e

        try:
            if not 200 <= response.status_code < 300:
                raise HTTPError(
                    f"Provider catalog returned status {response.status_code}",
                    url=url,
                    status_code=response.status_code,
                )
            try:
                providers = providers_from_json(response.json())
            except ValueError as e:
                # json decoding errors are ValueError subclasses as well
                raise DecodeError(f"Failed to decode provider catalog response: {e}", source=url) from e
        finally:
            # Ensure response is closed to prevent resource leaks
            response.close()

        log_debug(LogEvent.CATALOG_FETCH, "Fetched provider catalog", url=url, providers=len(providers))
        return providers
