"""Anthropic (Claude) oracle provider."""

from __future__ import annotations

from typing import TYPE_CHECKING

import anthropic
import instructor
from anthropic import AsyncAnthropic

from cv_formatter_agents.prompts.cv_structurer import CV_STRUCTURER_SYSTEM
from cv_formatter_agents.providers.base import CvDraftCandidate, OracleProvider

if TYPE_CHECKING:
    from cv_formatter_core.config.settings import Settings


class AnthropicProvider(OracleProvider):
    """Claude through the Messages API and instructor tool calling."""

    name = "anthropic"
    transient_errors = (
        anthropic.APIConnectionError,
        anthropic.RateLimitError,
        anthropic.InternalServerError,
    )

    def __init__(self, settings: Settings, api_key: str) -> None:
        super().__init__(settings, settings.anthropic_model)
        self._client = AsyncAnthropic(api_key=api_key, timeout=settings.oracle_timeout_seconds)
        self._instructor = instructor.from_anthropic(self._client)

    async def _create(self, messages: list[dict[str, str]]) -> CvDraftCandidate:
        response: CvDraftCandidate = await self._instructor.messages.create(
            model=self.model,
            max_tokens=self.settings.oracle_max_tokens,
            temperature=self.settings.oracle_temperature,
            system=CV_STRUCTURER_SYSTEM,
            messages=messages,
            response_model=CvDraftCandidate,
            max_retries=1,
        )
        return response
