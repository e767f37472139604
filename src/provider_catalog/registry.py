"""Provider registry: cached, lazily initialized provider list.

This module provides the ProviderRegistry class, which decides between the
on-disk cache and a live catalog fetch, adds the locally probed provider and
keeps the cache fresh in the background.

Typical usage:

    from provider_catalog import ProviderRegistry

    with ProviderRegistry() as registry:
        providers = registry.get()

The registry is an ordinary object; the application owns one instance and
passes it to whatever needs the provider list.
"""

import threading
import time
from datetime import timedelta
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .cache import DEFAULT_MAX_AGE, CacheStore
from .catalog import DEFAULT_CATALOG_TIMEOUT, CatalogClient, CatwalkClient
from .config_paths import get_provider_cache_path, is_local_probe_disabled
from .errors import DecodeError, ReadError, RegistryInitError, WriteError
from .local import DEFAULT_PROBE_TIMEOUT, LOCAL_PROVIDER_ID, LocalProber
from .logging import LogEvent, get_logger, log_debug, log_error, log_info, log_warning
from .schema import Model, Provider, validate_providers

# Create module logger
logger = get_logger("registry")


class RegistryConfig:
    """Configuration for the provider registry."""

    def __init__(
        self,
        cache_path: Optional[str] = None,
        cache_max_age: timedelta = DEFAULT_MAX_AGE,
        catalog_url: Optional[str] = None,
        catalog_timeout: float = DEFAULT_CATALOG_TIMEOUT,
        local_probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        enable_local_probe: Optional[bool] = None,
        background_refresh: bool = True,
    ):
        """Initialize registry configuration.

        Args:
            cache_path: Custom path to the provider cache file. If None, the
                        default location is used.
            cache_max_age: Age after which the cache is refetched.
            catalog_url: Catalog base URL. If None, ``CATWALK_URL`` or the
                         default catalog is used.
            catalog_timeout: Timeout in seconds for catalog requests.
            local_probe_timeout: Timeout in seconds for the local server probe.
            enable_local_probe: Whether to probe the local server. If None,
                                ``PROVIDER_CATALOG_DISABLE_LOCAL`` decides.
            background_refresh: Whether a fresh cache hit schedules a refresh.
        """
        self.cache_path = cache_path or str(get_provider_cache_path())

        if cache_max_age.total_seconds() <= 0:
            raise ValueError("cache_max_age must be positive")
        self.cache_max_age = cache_max_age

        self.catalog_url = catalog_url

        if catalog_timeout <= 0:
            raise ValueError("catalog_timeout must be positive")
        if local_probe_timeout <= 0:
            raise ValueError("local_probe_timeout must be positive")
        self.catalog_timeout = catalog_timeout
        self.local_probe_timeout = local_probe_timeout

        if enable_local_probe is None:
            enable_local_probe = not is_local_probe_disabled()
        self.enable_local_probe = enable_local_probe
        self.background_refresh = background_refresh


class RegistryState(Enum):
    """Initialization state of a registry."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class ProviderSource(Enum):
    """Where the served provider list came from."""

    FRESH_CACHE = "fresh_cache"
    LIVE = "live"
    STALE_CACHE = "stale_cache"


class ProviderRegistry:
    """Registry of available providers, loaded once per instance."""

    REFRESH_THREAD_NAME = "provider-cache-refresh"

    def __init__(
        self,
        client: Optional[CatalogClient] = None,
        cache: Optional[CacheStore] = None,
        prober: Optional[LocalProber] = None,
        config: Optional[RegistryConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize a new registry instance.

        Nothing is loaded until the first call to :meth:`get`.

        Args:
            client: Catalog client. If None, a CatwalkClient is built from the config.
            cache: Cache store. If None, one is built from the config.
            prober: Local server prober. If None and the local probe is
                    enabled, a LocalProber for the default address is used.
            config: Registry configuration. If None, default configuration is used.
            clock: Time source for cache staleness when the cache store is built here.
        """
        self.config = config or RegistryConfig()
        self._client: CatalogClient = client or CatwalkClient(
            base_url=self.config.catalog_url, timeout=self.config.catalog_timeout
        )
        self._cache = cache or CacheStore(self.config.cache_path, max_age=self.config.cache_max_age, clock=clock)
        if prober is None and self.config.enable_local_probe:
            prober = LocalProber()
        self._prober = prober if self.config.enable_local_probe else None

        self._init_lock = threading.Lock()
        self._state = RegistryState.UNINITIALIZED
        self._providers: Tuple[Provider, ...] = ()
        self._source: Optional[ProviderSource] = None
        self._error: Optional[RegistryInitError] = None

        self._refresh_thread: Optional[threading.Thread] = None
        self._closing = threading.Event()

    def __enter__(self) -> "ProviderRegistry":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def cache(self) -> CacheStore:
        """Cache store backing this registry."""
        return self._cache

    @property
    def state(self) -> RegistryState:
        """Current initialization state."""
        return self._state

    @property
    def source(self) -> Optional[ProviderSource]:
        """Source of the served list, once the registry is ready."""
        return self._source

    @property
    def error(self) -> Optional[RegistryInitError]:
        """Terminal error, once the registry has failed."""
        return self._error

    def get(self) -> List[Provider]:
        """Get the provider list, loading it on first use.

        Concurrent first callers block until the single load finishes and then
        all receive its result. The outcome, success or failure, is final for
        this instance.

        Returns:
            Providers, with the local provider (if reachable) last

        Raises:
            RegistryInitError: If no data source produced any provider
        """
        if self._state not in (RegistryState.READY, RegistryState.FAILED):
            with self._init_lock:
                if self._state is RegistryState.UNINITIALIZED:
                    try:
                        self._initialize()
                    finally:
                        if self._state is RegistryState.INITIALIZING:
                            self._error = RegistryInitError("Provider initialization was interrupted")
                            self._state = RegistryState.FAILED

        if self._state is RegistryState.FAILED:
            assert self._error is not None
            raise self._error
        return list(self._providers)

    def find_provider(self, provider_id: str) -> Optional[Provider]:
        """Return the provider with the given ID, if any."""
        for provider in self.get():
            if provider.id == provider_id:
                return provider
        return None

    def find_model(self, provider_id: str, model_id: str) -> Optional[Model]:
        """Return a provider's model by ID, if both exist."""
        provider = self.find_provider(provider_id)
        if provider is None:
            return None
        return provider.get_model(model_id)

    def refresh_cache(self) -> List[Provider]:
        """Fetch the catalog and overwrite the cache file.

        This is the work the background refresh performs. The in-memory list
        served by :meth:`get` is not updated, so a long-lived process keeps
        serving the list it loaded first even after the file changes.

        Returns:
            The list written to the cache

        Raises:
            ProviderCatalogError: If the catalog fetch fails
            RegistryInitError: If the catalog returns no providers
            WriteError: If the cache file cannot be written
        """
        providers = self._fetch_for_refresh()
        self._cache.save(providers)
        return providers

    def wait_for_refresh(self, timeout: Optional[float] = None) -> bool:
        """Wait for a running background refresh.

        Args:
            timeout: Maximum seconds to wait; None waits indefinitely

        Returns:
            True if no refresh is running anymore
        """
        thread = self._refresh_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def close(self, wait: bool = True, cancel: bool = False) -> None:
        """Shut down the background refresh.

        Args:
            wait: Join the refresh thread before returning
            cancel: Skip the pending cache write if the refresh has not written yet
        """
        if cancel:
            self._closing.set()
        if wait:
            self.wait_for_refresh()

    def _initialize(self) -> None:
        self._state = RegistryState.INITIALIZING
        try:
            providers, source = self._load()
        except RegistryInitError as e:
            self._error = e
            self._state = RegistryState.FAILED
            log_error(LogEvent.PROVIDER_REGISTRY, "Failed to load providers", error=str(e))
            return
        except Exception as e:
            error = RegistryInitError(f"Unexpected error while loading providers: {e}", causes=[e])
            error.__cause__ = e
            self._error = error
            self._state = RegistryState.FAILED
            logger.exception("Unexpected error while loading providers")
            return

        for problem in validate_providers(providers):
            log_warning(LogEvent.PROVIDER_REGISTRY, problem)

        self._providers = tuple(providers)
        self._source = source
        self._state = RegistryState.READY
        log_info(
            LogEvent.PROVIDER_REGISTRY,
            "Provider registry ready",
            source=source.value,
            providers=len(providers),
        )

    def _load(self) -> Tuple[List[Provider], ProviderSource]:
        """Run the cache / live / stale-cache fallback chain."""
        causes: List[Exception] = []
        local = _LazyLocalProvider(self)
        cache_path = str(self._cache.path)

        stale, exists = self._cache.is_stale()
        cached: Optional[List[Provider]] = None
        cache_tried = False

        if exists and not stale:
            log_info(LogEvent.PROVIDER_CACHE, "Using cached provider data", path=cache_path)
            cache_tried = True
            cached = self._load_cache(causes)
            if cached:
                self._start_background_refresh()
                return self._merge_local(cached, local.get()), ProviderSource.FRESH_CACHE

        log_info(LogEvent.CATALOG_FETCH, "Getting live provider data")
        live: List[Provider] = []
        fetched = False
        try:
            live = self._client.get_providers()
            fetched = True
        except Exception as e:
            # Any client failure, including timeouts, falls through to the cache.
            log_warning(LogEvent.CATALOG_FETCH, "Failed to fetch provider catalog", error=str(e))
            causes.append(e)

        merged = self._merge_local(live, local.get())
        if fetched and merged:
            try:
                self._cache.save(merged)
            except WriteError as e:
                log_warning(LogEvent.PROVIDER_CACHE, "Failed to save provider cache", error=str(e), path=cache_path)
            return merged, ProviderSource.LIVE
        if fetched:
            causes.append(RegistryInitError("Provider catalog returned no providers"))

        if exists:
            if not cache_tried:
                cached = self._load_cache(causes)
            if cached is not None:
                merged = self._merge_local(cached, local.get())
                if merged:
                    log_info(LogEvent.PROVIDER_CACHE, "Falling back to stale provider cache", path=cache_path)
                    return merged, ProviderSource.STALE_CACHE

        raise RegistryInitError("Failed to load providers", causes=causes)

    def _load_cache(self, causes: List[Exception]) -> Optional[List[Provider]]:
        try:
            return self._cache.load()
        except (ReadError, DecodeError) as e:
            log_warning(LogEvent.PROVIDER_CACHE, "Failed to load provider cache", error=str(e))
            causes.append(e)
            return None

    def _probe_local(self) -> Optional[Provider]:
        """Build the local provider, absorbing every probe failure."""
        if self._prober is None:
            return None
        try:
            provider = self._prober.build_provider(timeout=self.config.local_probe_timeout)
        except Exception as e:
            log_debug(LogEvent.LOCAL_PROBE, "Local provider not available", error=str(e))
            return None
        log_info(LogEvent.LOCAL_PROBE, "Adding local provider", model_count=len(provider.models))
        return provider

    @staticmethod
    def _merge_local(providers: Sequence[Provider], local: Optional[Provider]) -> List[Provider]:
        """Append the local provider after the others.

        Entries already carrying the local provider ID (for example from an
        earlier cache write) are replaced by the fresh probe result.
        """
        merged = [p for p in providers if p.id != LOCAL_PROVIDER_ID]
        if local is not None:
            merged.append(local)
        return merged

    def _fetch_for_refresh(self) -> List[Provider]:
        providers = self._client.get_providers()
        if not providers:
            raise RegistryInitError("Provider catalog returned no providers")
        return self._merge_local(providers, self._probe_local())

    def _start_background_refresh(self) -> None:
        if not self.config.background_refresh:
            return
        thread = threading.Thread(target=self._run_background_refresh, name=self.REFRESH_THREAD_NAME)
        self._refresh_thread = thread
        thread.start()

    def _run_background_refresh(self) -> None:
        log_info(LogEvent.BACKGROUND_REFRESH, "Updating provider cache in background")
        try:
            providers = self._fetch_for_refresh()
            if self._closing.is_set():
                log_debug(LogEvent.BACKGROUND_REFRESH, "Registry closed, discarding refreshed providers")
                return
            self._cache.save(providers)
        except Exception as e:
            log_warning(LogEvent.BACKGROUND_REFRESH, "Background provider refresh failed", error=str(e))
            return
        log_info(LogEvent.BACKGROUND_REFRESH, "Provider cache refreshed", providers=len(providers))


class _LazyLocalProvider:
    """Probes the local server at most once per load."""

    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry
        self._probed = False
        self._provider: Optional[Provider] = None

    def get(self) -> Optional[Provider]:
        if not self._probed:
            self._provider = self._registry._probe_local()
            self._probed = True
        return self._provider
