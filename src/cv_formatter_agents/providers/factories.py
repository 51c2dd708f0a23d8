"""Factory functions for oracle providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cv_formatter_core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from cv_formatter_agents.providers.base import OracleProvider
    from cv_formatter_core.config.settings import Settings

logger = structlog.get_logger()


def create_provider(name: str, settings: Settings) -> OracleProvider | None:
    """Create one provider by name, or None when its API key is missing."""
    if name == "openai":
        if settings.openai_api_key is None:
            return None
        from cv_formatter_agents.providers.openai_provider import OpenAIProvider

        return OpenAIProvider(settings, settings.openai_api_key.get_secret_value())

    if name == "anthropic":
        if settings.anthropic_api_key is None:
            return None
        from cv_formatter_agents.providers.anthropic_provider import AnthropicProvider

        return AnthropicProvider(settings, settings.anthropic_api_key.get_secret_value())

    if name == "gemini":
        if settings.google_api_key is None:
            return None
        from cv_formatter_agents.providers.gemini_provider import GeminiProvider

        return GeminiProvider(settings, settings.google_api_key.get_secret_value())

    msg = f"Unknown provider: {name}"
    raise ConfigurationError(msg)


def create_providers(settings: Settings) -> list[OracleProvider]:
    """Build providers in ``settings.provider_order``, skipping keyless ones.

    Raises:
        ConfigurationError: If no provider has an API key.
    """
    providers: list[OracleProvider] = []
    for name in settings.provider_order:
        provider = create_provider(name, settings)
        if provider is None:
            logger.warning("provider_skipped_no_api_key", provider=name)
            continue
        providers.append(provider)

    if not providers:
        msg = (
            "No oracle provider is configured; set at least one of "
            "EHS_OPENAI_API_KEY, EHS_ANTHROPIC_API_KEY or EHS_GOOGLE_API_KEY"
        )
        raise ConfigurationError(msg)

    logger.info("providers_configured", providers=[p.name for p in providers])
    return providers
