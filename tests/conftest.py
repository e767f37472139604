"""Shared fixtures for provider catalog tests."""

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Generator, List, Optional, Sequence
from unittest.mock import MagicMock

import pytest

from provider_catalog.cache import CacheStore
from provider_catalog.registry import ProviderRegistry, RegistryConfig
from provider_catalog.schema import Model, Provider, ProviderType, providers_to_json


def make_model(model_id: str, context_window: int = 128000, **kwargs: object) -> Model:
    """Create a catalog model with sensible defaults."""
    params = {
        "name": model_id.upper(),
        "default_max_tokens": 4096,
        "cost_per_1m_in": 2.5,
        "cost_per_1m_out": 10.0,
    }
    params.update(kwargs)
    return Model(id=model_id, context_window=context_window, **params)  # type: ignore[arg-type]


def make_provider(provider_id: str, model_ids: Sequence[str] = ("large", "small"), **kwargs: object) -> Provider:
    """Create a provider whose defaults point at its first two models."""
    models = tuple(make_model(f"{provider_id}-{m}") for m in model_ids)
    params = {
        "name": provider_id.title(),
        "type": ProviderType.OPENAI,
        "api_endpoint": f"https://api.{provider_id}.example/v1",
        "api_key": f"${provider_id.upper()}_API_KEY",
        "models": models,
        "default_large_model_id": models[0].id if models else "",
        "default_small_model_id": models[-1].id if models else "",
    }
    params.update(kwargs)
    return Provider(id=provider_id, **params)  # type: ignore[arg-type]


def make_local_provider(model_ids: Sequence[str] = ("llama3:8b",)) -> Provider:
    """Create a provider shaped like the one the local prober builds."""
    models = tuple(Model(id=m, name=m, context_window=8192, default_max_tokens=2048) for m in model_ids)
    return Provider(
        id="ollama",
        name="Ollama (Local)",
        type=ProviderType.OPENAI,
        api_endpoint="http://localhost:11434/v1",
        models=models,
        default_large_model_id=models[0].id,
        default_small_model_id=models[0].id,
    )


def write_cache(path: Path, providers: Sequence[Provider], age_hours: float = 0.0) -> None:
    """Write a cache file and backdate its modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(providers_to_json(providers), indent=2))
    mtime = time.time() - age_hours * 3600
    os.utime(path, (mtime, mtime))


class FakeCatalogClient:
    """Catalog client returning canned providers, optionally after a gate opens."""

    def __init__(
        self,
        providers: Optional[List[Provider]] = None,
        error: Optional[Exception] = None,
        gate: Optional[threading.Event] = None,
        delay: float = 0.0,
    ) -> None:
        self.providers = providers or []
        self.error = error
        self.gate = gate
        self.delay = delay
        self.calls = 0
        self.started = threading.Event()
        self._lock = threading.Lock()

    def get_providers(self) -> List[Provider]:
        with self._lock:
            self.calls += 1
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.providers)


class FakeProber:
    """Stand-in for LocalProber.build_provider."""

    def __init__(self, provider: Optional[Provider] = None, error: Optional[Exception] = None) -> None:
        self.provider = provider
        self.error = error
        self.calls = 0

    def build_provider(self, timeout: float = 5.0) -> Provider:
        self.calls += 1
        if self.error is not None:
            raise self.error
        assert self.provider is not None
        return self.provider


@pytest.fixture(autouse=True)
def reset_package_logging() -> Generator[None, None, None]:
    """Drop handlers and levels the CLI installs on the package logger."""
    package_logger = logging.getLogger("provider_catalog")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
    package_logger.setLevel(level)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from the real data directory and local server settings."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    for name in ("PROVIDER_CATALOG_CACHE_PATH", "PROVIDER_CATALOG_DISABLE_LOCAL", "CATWALK_URL", "OLLAMA_HOST"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    """Location of the provider cache for a test."""
    return tmp_path / "data" / "providers.json"


@pytest.fixture
def catalog_providers() -> List[Provider]:
    """Providers as the remote catalog would return them."""
    return [make_provider("openai"), make_provider("anthropic", type=ProviderType.ANTHROPIC)]


@pytest.fixture
def cached_providers() -> List[Provider]:
    """Providers as an earlier run left them in the cache."""
    return [make_provider("openai", ("old",)), make_provider("gemini", type=ProviderType.GEMINI)]


@pytest.fixture
def build_registry(cache_path: Path):  # type: ignore[no-untyped-def]
    """Factory building a registry over fakes; closes every registry it made."""
    registries: List[ProviderRegistry] = []

    def _build(
        client: FakeCatalogClient,
        prober: Optional[FakeProber] = None,
        background_refresh: bool = True,
    ) -> ProviderRegistry:
        config = RegistryConfig(
            cache_path=str(cache_path),
            enable_local_probe=prober is not None,
            background_refresh=background_refresh,
        )
        registry = ProviderRegistry(
            client=client,
            cache=CacheStore(cache_path),
            prober=prober,  # type: ignore[arg-type]
            config=config,
        )
        registries.append(registry)
        return registry

    yield _build

    for registry in registries:
        registry.close(wait=True, cancel=True)


@pytest.fixture
def mock_response() -> MagicMock:
    """A requests response answering 200 with an empty JSON object."""
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {}
    return response
