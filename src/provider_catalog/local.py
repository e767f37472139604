"""Discovery of models served by a local Ollama server.

The prober lists the server's installed models through ``/api/tags`` and turns
them into a provider entry. Everything the catalog needs that the server does
not report (context window, image support) is guessed from the model name by
the pure functions in this module.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple
from urllib.parse import urlsplit

import requests

from .config_paths import ENV_OLLAMA_HOST
from .errors import ConnectError, DecodeError, HTTPError, NetworkError, NoModelsError
from .logging import LogEvent, log_debug
from .schema import Model, Provider, ProviderType

LOCAL_PROVIDER_ID = "ollama"
LOCAL_PROVIDER_NAME = "Ollama (Local)"
DEFAULT_LOCAL_BASE_URL = "http://localhost:11434"
DEFAULT_PROBE_TIMEOUT = 5.0

DEFAULT_CONTEXT_WINDOW = 4096

# Evaluated in order; a later match overrides an earlier one.
CONTEXT_WINDOW_RULES: Tuple[Tuple[str, int], ...] = (
    ("llama", 8192),
    ("mistral", 8192),
    ("codellama", 16384),
)
IMAGE_MARKERS: Tuple[str, ...] = ("vision", "llava")
LARGE_MODEL_MARKERS: Tuple[str, ...] = ("70b", "13b")
SMALL_MODEL_MARKERS: Tuple[str, ...] = ("7b", "3b")


@dataclass
class LocalModelDetails:
    """Details block of a local model descriptor."""

    format: str = ""
    family: str = ""
    families: List[str] = field(default_factory=list)
    parameter_size: str = ""
    quantization_level: str = ""


@dataclass
class RawLocalModel:
    """A model descriptor as returned by ``/api/tags``.

    Only ``name`` drives behavior; the other fields are carried for display.
    """

    name: str
    modified_at: str = ""
    size: int = 0
    digest: str = ""
    details: LocalModelDetails = field(default_factory=LocalModelDetails)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawLocalModel":
        """Build a descriptor from the server's JSON.

        Raises:
            ValueError: If the entry has no usable name
        """
        if not isinstance(data, dict) or not isinstance(data.get("name"), str) or not data["name"]:
            raise ValueError("Local model entry is missing its name")

        raw_details = data.get("details")
        if raw_details is None:
            raw_details = {}
        if not isinstance(raw_details, dict):
            raise ValueError(f"Local model '{data['name']}': 'details' must be an object")
        families = raw_details.get("families")
        if families is None:
            families = []
        if not isinstance(families, list):
            raise ValueError(f"Local model '{data['name']}': 'families' must be a list")
        details = LocalModelDetails(
            format=str(raw_details.get("format") or ""),
            family=str(raw_details.get("family") or ""),
            families=[str(f) for f in families],
            parameter_size=str(raw_details.get("parameter_size") or ""),
            quantization_level=str(raw_details.get("quantization_level") or ""),
        )
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError):
            size = 0

        return cls(
            name=data["name"],
            modified_at=str(data.get("modified_at") or ""),
            size=size,
            digest=str(data.get("digest") or ""),
            details=details,
        )


class ModelAttributes(NamedTuple):
    """Capabilities inferred from a model name."""

    context_window: int
    default_max_tokens: int
    supports_images: bool


def display_name(name: str) -> str:
    """Turn ``base:tag`` into ``base (tag)``.

    Names without a tag are returned unchanged.
    """
    base, sep, tag = name.partition(":")
    if not sep or not tag:
        return name
    return f"{base} ({tag})"


def infer_model_attributes(name: str) -> ModelAttributes:
    """Guess context window and image support from a model name.

    Args:
        name: Raw model name, e.g. ``"codellama:7b"``

    Returns:
        Inferred attributes; ``default_max_tokens`` is a quarter of the context window
    """
    lowered = name.lower()

    context_window = DEFAULT_CONTEXT_WINDOW
    for marker, window in CONTEXT_WINDOW_RULES:
        if marker in lowered:
            context_window = window

    return ModelAttributes(
        context_window=context_window,
        default_max_tokens=context_window // 4,
        supports_images=any(marker in lowered for marker in IMAGE_MARKERS),
    )


def convert_model(raw: RawLocalModel) -> Model:
    """Convert a local model descriptor into a catalog model.

    Local models carry no API cost.
    """
    attributes = infer_model_attributes(raw.name)
    return Model(
        id=raw.name,
        name=display_name(raw.name),
        context_window=attributes.context_window,
        default_max_tokens=attributes.default_max_tokens,
        supports_images=attributes.supports_images,
    )


def _first_matching(models: Sequence[Model], markers: Sequence[str]) -> str:
    for model in models:
        lowered = model.name.lower()
        if any(marker in lowered for marker in markers):
            return model.id
    return ""


def select_default_models(models: Sequence[Model]) -> Tuple[str, str]:
    """Pick the default large and small models.

    The first model mentioning 70b/13b is the large default and the first
    mentioning 7b/3b is the small default. Without a large match the first
    model is used; without a small match the second model, or the large model
    when there is only one.

    Args:
        models: Candidate models in server order

    Returns:
        ``(large_id, small_id)``; both empty when there are no models
    """
    if not models:
        return "", ""

    large = _first_matching(models, LARGE_MODEL_MARKERS) or models[0].id
    small = _first_matching(models, SMALL_MODEL_MARKERS)
    if not small:
        small = models[1].id if len(models) > 1 else large
    return large, small


def _resolve_base_url(host: Optional[str]) -> str:
    """Normalize an ``OLLAMA_HOST`` style value into a base URL.

    Without a scheme the server's default port applies; with an explicit
    scheme the scheme's default port does, as in the Ollama client.
    """
    host = (host or "").strip()
    if not host:
        return DEFAULT_LOCAL_BASE_URL

    if "://" in host:
        parts = urlsplit(host)
        default_port = {"http": 80, "https": 443}.get(parts.scheme, 11434)
    else:
        parts = urlsplit(f"http://{host}")
        default_port = 11434

    hostname = parts.hostname or "localhost"
    if hostname == "0.0.0.0":
        hostname = "localhost"
    if ":" in hostname:
        hostname = f"[{hostname}]"
    port = parts.port or default_port
    return f"{parts.scheme}://{hostname}:{port}"


class LocalProber:
    """Probes a local Ollama server for installed models."""

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None) -> None:
        """Initialize the prober.

        Args:
            base_url: Server base URL. If None, ``OLLAMA_HOST`` or the default
                      loopback address is used.
            session: Optional requests session to issue requests through
        """
        if base_url is None:
            base_url = _resolve_base_url(os.environ.get(ENV_OLLAMA_HOST))
        self.base_url = base_url.rstrip("/")
        self._session = session

    @property
    def tags_url(self) -> str:
        """URL of the model listing endpoint."""
        return f"{self.base_url}/api/tags"

    @property
    def api_endpoint(self) -> str:
        """OpenAI-compatible endpoint advertised for the local provider."""
        return f"{self.base_url}/v1"

    def list_models(self, timeout: float = DEFAULT_PROBE_TIMEOUT) -> List[RawLocalModel]:
        """List the models installed on the local server.

        Args:
            timeout: Request timeout in seconds

        Returns:
            Model descriptors in server order

        Raises:
            ConnectError: If the server is not running or does not answer in time
            HTTPError: If the server answers with a non-success status
            DecodeError: If the response is not the expected JSON document
        """
        url = self.tags_url
        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(url, timeout=timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ConnectError(f"Failed to connect to Ollama: {e}", url=url) from e
        except requests.RequestException as e:
            raise NetworkError(f"Ollama request failed: {e}", url=url) from e

        try:
            if not 200 <= response.status_code < 300:
                raise HTTPError(
                    f"Ollama API returned status {response.status_code}",
                    url=url,
                    status_code=response.status_code,
                )
            try:
                payload = response.json()
                if not isinstance(payload, dict):
                    raise ValueError(f"expected an object, got {type(payload).__name__}")
                entries = payload.get("models")
                if entries is None:
                    entries = []
                if not isinstance(entries, list):
                    raise ValueError("'models' must be a list")
                models = [RawLocalModel.from_dict(entry) for entry in entries]
            except (TypeError, ValueError) as e:
                raise DecodeError(f"Failed to decode Ollama response: {e}", source=url) from e
        finally:
            response.close()

        return models

    def build_provider(self, timeout: float = DEFAULT_PROBE_TIMEOUT) -> Provider:
        """Build the local provider entry from the installed models.

        Args:
            timeout: Request timeout in seconds

        Returns:
            The local provider

        Raises:
            NoModelsError: If the server has no models installed
            ConnectError, HTTPError, DecodeError: If the probe fails
        """
        return self.make_provider(self.list_models(timeout=timeout))

    def make_provider(self, raw_models: Sequence[RawLocalModel]) -> Provider:
        """Build the local provider entry from already listed models.

        Raises:
            NoModelsError: If ``raw_models`` is empty
        """
        models = [convert_model(raw) for raw in raw_models]
        if not models:
            raise NoModelsError("No models found in local Ollama installation")

        large, small = select_default_models(models)
        log_debug(LogEvent.LOCAL_PROBE, "Discovered local models", count=len(models), large=large, small=small)

        return Provider(
            id=LOCAL_PROVIDER_ID,
            name=LOCAL_PROVIDER_NAME,
            type=ProviderType.OPENAI,
            api_endpoint=self.api_endpoint,
            api_key="",
            models=tuple(models),
            default_large_model_id=large,
            default_small_model_id=small,
        )
