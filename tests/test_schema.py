"""Tests for provider and model data structures."""

import pytest

from provider_catalog.schema import (
    Model,
    Provider,
    ProviderType,
    providers_from_json,
    providers_to_json,
    validate_providers,
)

from .conftest import make_model, make_provider


class TestModel:
    """Tests for the Model dataclass."""

    def test_negative_cost_rejected(self) -> None:
        """Test that negative costs are invalid."""
        with pytest.raises(ValueError, match="cost_per_1m_in must be non-negative"):
            Model(id="m", name="M", context_window=1000, default_max_tokens=100, cost_per_1m_in=-1)

    def test_frozen(self) -> None:
        """Test that models are immutable."""
        model = make_model("gpt-4o")
        with pytest.raises(AttributeError):
            model.context_window = 1  # type: ignore[misc]

    def test_from_dict_defaults(self) -> None:
        """Test that optional fields fall back to defaults."""
        model = Model.from_dict({"id": "tiny", "context_window": 2048, "default_max_tokens": 512})
        assert model.name == "tiny"
        assert model.supports_images is False
        assert model.cost_per_1m_in == 0.0
        assert model.default_reasoning_effort == ""

    def test_from_dict_attachments_key(self) -> None:
        """Test that image support is read from the attachments flag."""
        model = Model.from_dict({"id": "m", "context_window": 1, "default_max_tokens": 1, "supports_attachments": True})
        assert model.supports_images is True

    def test_from_dict_missing_id(self) -> None:
        """Test that an entry without an ID is rejected."""
        with pytest.raises(ValueError, match="missing required field 'id'"):
            Model.from_dict({"name": "No ID"})

    def test_from_dict_bad_number(self) -> None:
        """Test that a non-numeric field is rejected."""
        with pytest.raises(ValueError, match="Invalid model entry"):
            Model.from_dict({"id": "m", "context_window": "lots"})

    def test_to_dict_reasoning_effort(self) -> None:
        """Test that the reasoning effort is only written when set."""
        assert "default_reasoning_effort" not in make_model("a").to_dict()
        data = make_model("b", can_reason=True, default_reasoning_effort="medium").to_dict()
        assert data["default_reasoning_effort"] == "medium"
        assert data["can_reason"] is True


class TestProvider:
    """Tests for the Provider dataclass."""

    def test_unknown_type_preserved(self) -> None:
        """Test that unknown provider types survive a round trip."""
        provider = Provider.from_dict({"id": "new", "type": "quantum", "models": []})
        assert provider.type == "quantum"
        assert provider.type_name == "quantum"
        assert provider.to_dict()["type"] == "quantum"

    def test_known_type_is_enum(self) -> None:
        """Test that known provider types become enum members."""
        provider = Provider.from_dict({"id": "a", "type": "anthropic"})
        assert provider.type is ProviderType.ANTHROPIC
        assert provider.type_name == "anthropic"

    def test_get_model(self) -> None:
        """Test model lookup by ID."""
        provider = make_provider("openai")
        assert provider.get_model("openai-small") is provider.models[1]
        assert provider.get_model("missing") is None

    def test_models_must_be_list(self) -> None:
        """Test that a non-list models field is rejected."""
        with pytest.raises(ValueError, match="'models' must be a list"):
            Provider.from_dict({"id": "x", "type": "openai", "models": {}})

    @pytest.mark.parametrize("models", [{}, "", 0, False])
    def test_falsy_models_of_wrong_type_rejected(self, models: object) -> None:
        """Test that empty values of the wrong type are not read as an empty list."""
        with pytest.raises(ValueError, match="'models' must be a list"):
            Provider.from_dict({"id": "x", "type": "openai", "models": models})

    @pytest.mark.parametrize("headers", [[], "", 0])
    def test_headers_must_be_object(self, headers: object) -> None:
        """Test that default headers of the wrong type are rejected."""
        with pytest.raises(ValueError, match="'default_headers' must be an object"):
            Provider.from_dict({"id": "x", "type": "openai", "default_headers": headers})

    def test_null_collections_default_to_empty(self) -> None:
        """Test that explicit nulls read as empty collections."""
        provider = Provider.from_dict({"id": "x", "type": "openai", "models": None, "default_headers": None})
        assert provider.models == ()
        assert provider.default_headers == {}

    def test_headers_round_trip(self) -> None:
        """Test that default headers are written only when present."""
        plain = make_provider("openai")
        assert "default_headers" not in plain.to_dict()

        with_headers = make_provider("anthropic", default_headers={"anthropic-version": "2023-06-01"})
        assert Provider.from_dict(with_headers.to_dict()) == with_headers

    def test_hashable(self) -> None:
        """Test that providers can be used in sets despite the header dict."""
        provider = make_provider("openai", default_headers={"x": "y"})
        assert provider in {provider}


class TestProviderList:
    """Tests for list conversion and validation."""

    def test_json_round_trip(self) -> None:
        """Test that list conversion preserves order and content."""
        providers = [make_provider("openai"), make_provider("xai", type=ProviderType.XAI)]
        assert providers_from_json(providers_to_json(providers)) == providers

    def test_not_a_list(self) -> None:
        """Test that a non-list document is rejected."""
        with pytest.raises(ValueError, match="Expected a list of providers"):
            providers_from_json({"id": "openai"})

    def test_valid_list(self) -> None:
        """Test that a consistent list has no problems."""
        assert validate_providers([make_provider("openai"), make_provider("anthropic")]) == []

    def test_duplicate_provider(self) -> None:
        """Test that duplicate provider IDs are reported."""
        problems = validate_providers([make_provider("openai"), make_provider("openai")])
        assert problems == ["Duplicate provider ID 'openai'"]

    def test_duplicate_model(self) -> None:
        """Test that duplicate model IDs are reported."""
        problems = validate_providers([make_provider("openai", ("a", "a"))])
        assert problems == ["Provider 'openai': duplicate model ID 'openai-a'"]

    def test_bad_context_window(self) -> None:
        """Test that non-positive context windows and oversized max tokens are reported."""
        model = Model(id="m", name="M", context_window=0, default_max_tokens=10)
        provider = make_provider("openai", models=(model,), default_large_model_id="m", default_small_model_id="m")
        problems = validate_providers([provider])
        assert len(problems) == 2
        assert "non-positive context window" in problems[0]
        assert "exceed context window" in problems[1]

    def test_dangling_default(self) -> None:
        """Test that defaults pointing outside the model list are reported."""
        provider = make_provider("openai", default_large_model_id="gone")
        assert validate_providers([provider]) == [
            "Provider 'openai': default large model 'gone' is not in its model list"
        ]

    def test_empty_defaults_allowed(self) -> None:
        """Test that a provider without defaults is consistent."""
        provider = make_provider("openai", default_large_model_id="", default_small_model_id="")
        assert validate_providers([provider]) == []
