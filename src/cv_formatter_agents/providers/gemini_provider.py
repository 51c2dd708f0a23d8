"""Google Gemini oracle provider via the OpenAI-compatible endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import instructor

from cv_formatter_agents.providers.openai_provider import OpenAIProvider

if TYPE_CHECKING:
    from cv_formatter_core.config.settings import Settings


class GeminiProvider(OpenAIProvider):
    """Gemini models; structured output through JSON mode."""

    name = "gemini"
    instructor_mode = instructor.Mode.JSON

    def __init__(self, settings: Settings, api_key: str) -> None:
        super().__init__(
            settings,
            api_key=api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
        )
