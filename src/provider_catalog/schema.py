"""Provider and model data structures.

The field names on the wire (cache file and catalog responses) follow the
catalog service's JSON keys; :meth:`Provider.from_dict` and
:meth:`Provider.to_dict` translate between the two.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union


class ProviderType(str, Enum):
    """Protocol family a provider speaks."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    AZURE = "azure"
    BEDROCK = "bedrock"
    VERTEXAI = "vertexai"
    XAI = "xai"
    OPENROUTER = "openrouter"


def _provider_type(value: Any) -> Union[ProviderType, str]:
    # Unknown families are kept verbatim so newer catalogs still load.
    try:
        return ProviderType(value)
    except ValueError:
        return str(value)


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    if key not in data:
        raise ValueError(f"{kind} entry is missing required field '{key}'")
    return data[key]


@dataclass(frozen=True)
class Model:
    """A single model offered by a provider.

    Costs are expressed per million tokens and must be non-negative.
    """

    id: str
    name: str
    context_window: int
    default_max_tokens: int
    supports_images: bool = False
    cost_per_1m_in: float = 0.0
    cost_per_1m_out: float = 0.0
    cost_per_1m_in_cached: float = 0.0
    cost_per_1m_out_cached: float = 0.0
    can_reason: bool = False
    has_reasoning_efforts: bool = False
    default_reasoning_effort: str = ""

    def __post_init__(self) -> None:  # noqa: D401
        """Basic validation ensuring non-negative costs."""
        for cost_field in ("cost_per_1m_in", "cost_per_1m_out", "cost_per_1m_in_cached", "cost_per_1m_out_cached"):
            if getattr(self, cost_field) < 0:
                raise ValueError(f"Model '{self.id}': {cost_field} must be non-negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Model":
        """Build a model from its wire representation.

        Raises:
            ValueError: If a required field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Model entry must be an object, got {type(data).__name__}")
        try:
            return cls(
                id=str(_require(data, "id", "Model")),
                name=str(data.get("name") or data["id"]),
                context_window=int(data.get("context_window", 0)),
                default_max_tokens=int(data.get("default_max_tokens", 0)),
                supports_images=bool(data.get("supports_attachments", False)),
                cost_per_1m_in=float(data.get("cost_per_1m_in", 0)),
                cost_per_1m_out=float(data.get("cost_per_1m_out", 0)),
                cost_per_1m_in_cached=float(data.get("cost_per_1m_in_cached", 0)),
                cost_per_1m_out_cached=float(data.get("cost_per_1m_out_cached", 0)),
                can_reason=bool(data.get("can_reason", False)),
                has_reasoning_efforts=bool(data.get("has_reasoning_efforts", False)),
                default_reasoning_effort=str(data.get("default_reasoning_effort") or ""),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid model entry: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation of the model."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "cost_per_1m_in": self.cost_per_1m_in,
            "cost_per_1m_out": self.cost_per_1m_out,
            "cost_per_1m_in_cached": self.cost_per_1m_in_cached,
            "cost_per_1m_out_cached": self.cost_per_1m_out_cached,
            "context_window": self.context_window,
            "default_max_tokens": self.default_max_tokens,
            "can_reason": self.can_reason,
            "has_reasoning_efforts": self.has_reasoning_efforts,
            "supports_attachments": self.supports_images,
        }
        if self.default_reasoning_effort:
            data["default_reasoning_effort"] = self.default_reasoning_effort
        return data


@dataclass(frozen=True)
class Provider:
    """A model provider and the models it serves."""

    id: str
    name: str
    type: Union[ProviderType, str]
    api_endpoint: str = ""
    api_key: str = ""
    models: Tuple[Model, ...] = ()
    default_large_model_id: str = ""
    default_small_model_id: str = ""
    default_headers: Dict[str, str] = field(default_factory=dict, hash=False)

    @property
    def type_name(self) -> str:
        """Protocol family as a plain string."""
        return self.type.value if isinstance(self.type, ProviderType) else str(self.type)

    def get_model(self, model_id: str) -> Optional[Model]:
        """Return the model with the given ID, if the provider has one."""
        for model in self.models:
            if model.id == model_id:
                return model
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Provider":
        """Build a provider from its wire representation.

        Raises:
            ValueError: If the entry does not fit the provider schema
        """
        if not isinstance(data, dict):
            raise ValueError(f"Provider entry must be an object, got {type(data).__name__}")

        provider_id = str(_require(data, "id", "Provider"))
        raw_models = data.get("models")
        if raw_models is None:
            raw_models = []
        if not isinstance(raw_models, list):
            raise ValueError(f"Provider '{provider_id}': 'models' must be a list")
        raw_headers = data.get("default_headers")
        if raw_headers is None:
            raw_headers = {}
        if not isinstance(raw_headers, dict):
            raise ValueError(f"Provider '{provider_id}': 'default_headers' must be an object")

        return cls(
            id=provider_id,
            name=str(data.get("name") or provider_id),
            type=_provider_type(data.get("type", "")),
            api_endpoint=str(data.get("api_endpoint") or ""),
            api_key=str(data.get("api_key") or ""),
            models=tuple(Model.from_dict(m) for m in raw_models),
            default_large_model_id=str(data.get("default_large_model_id") or ""),
            default_small_model_id=str(data.get("default_small_model_id") or ""),
            default_headers={str(k): str(v) for k, v in raw_headers.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation of the provider."""
        data: Dict[str, Any] = {
            "name": self.name,
            "id": self.id,
            "api_key": self.api_key,
            "api_endpoint": self.api_endpoint,
            "type": self.type_name,
            "default_large_model_id": self.default_large_model_id,
            "default_small_model_id": self.default_small_model_id,
            "models": [model.to_dict() for model in self.models],
        }
        if self.default_headers:
            data["default_headers"] = dict(self.default_headers)
        return data


def providers_from_json(payload: Any) -> List[Provider]:
    """Convert a decoded JSON array into providers.

    Args:
        payload: Decoded JSON document

    Returns:
        Providers in document order

    Raises:
        ValueError: If the document is not an array of provider objects
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of providers, got {type(payload).__name__}")
    return [Provider.from_dict(item) for item in payload]


def providers_to_json(providers: Sequence[Provider]) -> List[Dict[str, Any]]:
    """Convert providers into a JSON-serializable list."""
    return [provider.to_dict() for provider in providers]


def validate_providers(providers: Sequence[Provider]) -> List[str]:
    """Check list-level invariants of a provider list.

    Args:
        providers: Providers to check

    Returns:
        Human-readable problems; empty when the list is consistent
    """
    problems: List[str] = []
    seen_providers = set()

    for provider in providers:
        if provider.id in seen_providers:
            problems.append(f"Duplicate provider ID '{provider.id}'")
        seen_providers.add(provider.id)

        model_ids = set()
        for model in provider.models:
            if model.id in model_ids:
                problems.append(f"Provider '{provider.id}': duplicate model ID '{model.id}'")
            model_ids.add(model.id)
            if model.context_window <= 0:
                problems.append(f"Provider '{provider.id}': model '{model.id}' has non-positive context window")
            if model.default_max_tokens > model.context_window:
                problems.append(
                    f"Provider '{provider.id}': model '{model.id}' default max tokens "
                    f"{model.default_max_tokens} exceed context window {model.context_window}"
                )

        for label, model_id in (
            ("default large", provider.default_large_model_id),
            ("default small", provider.default_small_model_id),
        ):
            if model_id and model_id not in model_ids:
                problems.append(f"Provider '{provider.id}': {label} model '{model_id}' is not in its model list")

    return problems
