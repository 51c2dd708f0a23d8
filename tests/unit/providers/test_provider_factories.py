"""Tests for provider factories."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

from cv_formatter_agents.providers.factories import create_provider, create_providers
from cv_formatter_core.exceptions import ConfigurationError
from tests.mocks.mock_settings import make_settings


@pytest.mark.unit
class TestCreateProvider:
    """Test create_provider."""

    def test_missing_key_returns_none(self) -> None:
        """A provider without API key is not built."""
        settings = make_settings()
        assert create_provider("openai", settings) is None
        assert create_provider("anthropic", settings) is None
        assert create_provider("gemini", settings) is None

    def test_unknown_name_raises(self) -> None:
        """Unknown providers are a configuration error."""
        with pytest.raises(ConfigurationError, match="Unknown provider"):
            create_provider("mistral", make_settings())

    def test_openai_built_with_key(self) -> None:
        """The secret value is handed to the provider."""
        settings = make_settings(openai_api_key=SecretStr("sk-test"))
        with patch(
            "cv_formatter_agents.providers.openai_provider.OpenAIProvider"
        ) as mock_cls:
            provider = create_provider("openai", settings)

        assert provider is mock_cls.return_value
        mock_cls.assert_called_once_with(settings, "sk-test")

    def test_gemini_built_with_google_key(self) -> None:
        """Gemini uses the Google API key."""
        settings = make_settings(google_api_key=SecretStr("gk-test"))
        with patch(
            "cv_formatter_agents.providers.gemini_provider.GeminiProvider"
        ) as mock_cls:
            create_provider("gemini", settings)

        mock_cls.assert_called_once_with(settings, "gk-test")


@pytest.mark.unit
class TestCreateProviders:
    """Test create_providers ordering and skipping."""

    def test_order_kept_and_keyless_skipped(self) -> None:
        """Providers follow provider_order; keyless ones are skipped with a warning."""
        settings = make_settings(provider_order=["gemini", "openai", "anthropic"])
        gemini, anthropic = MagicMock(), MagicMock()
        gemini.name, anthropic.name = "gemini", "anthropic"

        def _fake(name: str, _settings: object) -> MagicMock | None:
            return {"gemini": gemini, "anthropic": anthropic}.get(name)

        with (
            patch("cv_formatter_agents.providers.factories.create_provider", side_effect=_fake),
            patch("cv_formatter_agents.providers.factories.logger") as mock_logger,
        ):
            providers = create_providers(settings)

        assert providers == [gemini, anthropic]
        mock_logger.warning.assert_called_once_with("provider_skipped_no_api_key", provider="openai")

    def test_no_keys_raises(self) -> None:
        """At least one provider must have a key."""
        with pytest.raises(ConfigurationError, match="No oracle provider is configured"):
            create_providers(make_settings())
