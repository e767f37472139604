"""Tests for the remote catalog client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from provider_catalog.catalog import CatalogClient, CatwalkClient
from provider_catalog.errors import ConnectError, DecodeError, HTTPError, NetworkError
from provider_catalog.schema import ProviderType

CATALOG_RESPONSE = [
    {
        "name": "OpenAI",
        "id": "openai",
        "api_key": "$OPENAI_API_KEY",
        "api_endpoint": "$OPENAI_API_ENDPOINT",
        "type": "openai",
        "default_large_model_id": "gpt-4o",
        "default_small_model_id": "gpt-4o-mini",
        "models": [
            {
                "id": "gpt-4o",
                "name": "GPT-4o",
                "cost_per_1m_in": 2.5,
                "cost_per_1m_out": 10,
                "cost_per_1m_in_cached": 0,
                "cost_per_1m_out_cached": 1.25,
                "context_window": 128000,
                "default_max_tokens": 20000,
                "can_reason": False,
                "supports_attachments": True,
            },
            {
                "id": "gpt-4o-mini",
                "name": "GPT-4o-mini",
                "cost_per_1m_in": 0.15,
                "cost_per_1m_out": 0.6,
                "context_window": 128000,
                "default_max_tokens": 20000,
                "supports_attachments": True,
            },
        ],
    },
    {
        "name": "Anthropic",
        "id": "anthropic",
        "api_key": "$ANTHROPIC_API_KEY",
        "type": "anthropic",
        "default_large_model_id": "claude-sonnet-4",
        "default_small_model_id": "claude-sonnet-4",
        "default_headers": {"anthropic-version": "2023-06-01"},
        "models": [
            {
                "id": "claude-sonnet-4",
                "name": "Claude Sonnet 4",
                "context_window": 200000,
                "default_max_tokens": 50000,
                "can_reason": True,
                "has_reasoning_efforts": False,
            }
        ],
    },
]


class TestCatwalkClient:
    """Tests for fetching the provider list over HTTP."""

    def test_default_url(self) -> None:
        """Test the default catalog location."""
        assert CatwalkClient().providers_url == "https://catwalk.charm.sh/providers"

    def test_url_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that CATWALK_URL overrides the default."""
        monkeypatch.setenv("CATWALK_URL", "http://catalog.internal:8080/")
        assert CatwalkClient().providers_url == "http://catalog.internal:8080/providers"

    def test_explicit_url_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an explicit base URL beats the environment."""
        monkeypatch.setenv("CATWALK_URL", "http://ignored")
        assert CatwalkClient(base_url="http://explicit").providers_url == "http://explicit/providers"

    def test_invalid_timeout(self) -> None:
        """Test that a non-positive timeout is rejected."""
        with pytest.raises(ValueError):
            CatwalkClient(timeout=0)

    def test_satisfies_protocol(self) -> None:
        """Test that the HTTP client is a CatalogClient."""
        assert isinstance(CatwalkClient(), CatalogClient)

    def test_get_providers(self, mock_response: MagicMock) -> None:
        """Test decoding a catalog response."""
        mock_response.json.return_value = CATALOG_RESPONSE
        with patch("requests.get", return_value=mock_response) as mock_get:
            providers = CatwalkClient(timeout=3).get_providers()

        mock_get.assert_called_once_with("https://catwalk.charm.sh/providers", timeout=3)
        mock_response.close.assert_called_once()

        assert [p.id for p in providers] == ["openai", "anthropic"]
        openai = providers[0]
        assert openai.type is ProviderType.OPENAI
        assert openai.api_key == "$OPENAI_API_KEY"
        gpt4o = openai.get_model("gpt-4o")
        assert gpt4o is not None
        assert gpt4o.supports_images is True
        assert gpt4o.cost_per_1m_out_cached == 1.25
        anthropic = providers[1]
        assert anthropic.default_headers == {"anthropic-version": "2023-06-01"}
        assert anthropic.models[0].can_reason is True

    def test_uses_session(self, mock_response: MagicMock) -> None:
        """Test that an injected session issues the request."""
        session = MagicMock()
        session.get.return_value = mock_response
        mock_response.json.return_value = []

        assert CatwalkClient(session=session).get_providers() == []
        session.get.assert_called_once_with("https://catwalk.charm.sh/providers", timeout=10.0)

    def test_connection_error(self) -> None:
        """Test that an unreachable catalog raises ConnectError."""
        with patch("requests.get", side_effect=requests.ConnectionError("Name or service not known")):
            with pytest.raises(ConnectError) as exc_info:
                CatwalkClient().get_providers()
        assert exc_info.value.url == "https://catwalk.charm.sh/providers"

    def test_timeout(self) -> None:
        """Test that a timed out request raises ConnectError."""
        with patch("requests.get", side_effect=requests.Timeout("read timed out")):
            with pytest.raises(ConnectError):
                CatwalkClient().get_providers()

    def test_other_request_error(self) -> None:
        """Test that other request failures raise NetworkError."""
        with patch("requests.get", side_effect=requests.TooManyRedirects("loop")):
            with pytest.raises(NetworkError) as exc_info:
                CatwalkClient().get_providers()
        assert not isinstance(exc_info.value, ConnectError)

    @pytest.mark.parametrize("status_code", [404, 500, 503])
    def test_http_error(self, mock_response: MagicMock, status_code: int) -> None:
        """Test that non-success statuses raise HTTPError."""
        mock_response.status_code = status_code
        with patch("requests.get", return_value=mock_response):
            with pytest.raises(HTTPError) as exc_info:
                CatwalkClient().get_providers()
        assert exc_info.value.status_code == status_code
        mock_response.close.assert_called_once()

    def test_invalid_json(self, mock_response: MagicMock) -> None:
        """Test that an undecodable body raises DecodeError."""
        mock_response.json.side_effect = ValueError("Expecting value")
        with patch("requests.get", return_value=mock_response):
            with pytest.raises(DecodeError):
                CatwalkClient().get_providers()
        mock_response.close.assert_called_once()

    def test_schema_mismatch(self, mock_response: MagicMock) -> None:
        """Test that a body that is not a provider list raises DecodeError."""
        mock_response.json.return_value = {"providers": CATALOG_RESPONSE}
        with patch("requests.get", return_value=mock_response):
            with pytest.raises(DecodeError):
                CatwalkClient().get_providers()
