"""OpenAI oracle provider."""

from __future__ import annotations

from typing import TYPE_CHECKING

import instructor
import openai
from openai import AsyncOpenAI

from cv_formatter_agents.prompts.cv_structurer import CV_STRUCTURER_SYSTEM
from cv_formatter_agents.providers.base import CvDraftCandidate, OracleProvider

if TYPE_CHECKING:
    from cv_formatter_core.config.settings import Settings


class OpenAIProvider(OracleProvider):
    """GPT models through Chat Completions and instructor tool calling."""

    name = "openai"
    transient_errors = (
        openai.APIConnectionError,
        openai.RateLimitError,
        openai.InternalServerError,
    )
    instructor_mode = instructor.Mode.TOOLS

    def __init__(
        self,
        settings: Settings,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
    ) -> None:
        super().__init__(settings, model or settings.openai_model)
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=settings.oracle_timeout_seconds,
        )
        self._instructor = instructor.from_openai(self._client, mode=self.instructor_mode)

    async def _create(self, messages: list[dict[str, str]]) -> CvDraftCandidate:
        response: CvDraftCandidate = await self._instructor.chat.completions.create(
            model=self.model,
            max_tokens=self.settings.oracle_max_tokens,
            temperature=self.settings.oracle_temperature,
            messages=[{"role": "system", "content": CV_STRUCTURER_SYSTEM}, *messages],
            response_model=CvDraftCandidate,
            max_retries=1,
        )
        return response
