"""Base oracle provider: structured output, retries and usage tracking."""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from cv_formatter_agents.observability.cost_tracker import (
    LLMCallMetrics,
    extract_token_usage,
    record_llm_call,
)
from cv_formatter_agents.prompts.cv_structurer import build_messages
from cv_formatter_core.constants import CV_STRUCTURER_PROMPT_VERSION

if TYPE_CHECKING:
    from cv_formatter_core.config.settings import Settings

logger = structlog.get_logger()


class CvDraftCandidate(BaseModel):
    """Permissive structured-output target.

    Everything is optional so that a partial answer still comes back; the
    schema validator decides whether the candidate is acceptable.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    header: dict[str, Any] = Field(default_factory=dict, description="name, title, photoUrl")
    personal_details: dict[str, Any] = Field(
        default_factory=dict, description="languages and other personal details"
    )
    profile: str | None = Field(default=None, description="Professional summary")
    experience: list[dict[str, Any]] = Field(
        default_factory=list, description="role, company, startDate, endDate, bullets"
    )
    education: list[dict[str, Any]] = Field(
        default_factory=list, description="degree, institution, startDate, endDate, details"
    )
    skills: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        """camelCase dict with extra keys carried along."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OracleProvider(ABC):
    """One LLM vendor behind the StructuringOracle interface."""

    name: str = "base"
    transient_errors: tuple[type[Exception], ...] = ()

    def __init__(self, settings: Settings, model: str) -> None:
        """Initialize with settings and the vendor model ID."""
        self.settings = settings
        self.model = model

    async def propose(self, text: str, schema: dict[str, object]) -> dict[str, object]:
        """Ask the model for a CV draft candidate.

        Transient vendor errors are retried with exponential backoff; other
        errors propagate to the fallback chain.
        """
        messages = build_messages(text, json.dumps(schema, indent=2))

        @retry(
            stop=stop_after_attempt(self.settings.oracle_max_retries + 1),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(self.transient_errors),
            reraise=True,
        )
        async def _do_call() -> CvDraftCandidate:
            return await self._create(messages)

        start = time.monotonic()
        candidate = await _do_call()
        elapsed = time.monotonic() - start

        input_tokens, output_tokens = extract_token_usage(candidate)
        record_llm_call(
            LLMCallMetrics(
                model=self.model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                duration_seconds=elapsed,
                provider=self.name,
            )
        )
        logger.debug(
            "oracle_call_complete",
            provider=self.name,
            model=self.model,
            prompt_version=CV_STRUCTURER_PROMPT_VERSION,
            duration=round(elapsed, 2),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
        return candidate.to_payload()

    @abstractmethod
    async def _create(self, messages: list[dict[str, str]]) -> CvDraftCandidate:
        """Run one structured-output request against the vendor API."""
        ...
