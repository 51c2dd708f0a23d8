"""Ordered provider fallback for structuring one text unit."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from cv_formatter_core.exceptions import (
    AllProvidersFailedError,
    CostLimitExceededError,
    DraftValidationError,
    ProviderFailureError,
)
from cv_formatter_core.interfaces.oracle import StructuringOracle
from cv_formatter_core.models.cv_draft import CvDraft
from cv_formatter_core.validation import cv_draft_json_schema, validate_cv_draft

logger = structlog.get_logger()


@dataclass(frozen=True)
class StructuredDraft:
    """A validated draft and the provider that produced it."""

    draft: CvDraft
    provider: str


class ProviderFallbackChain:
    """Try each provider in order until one yields a schema-valid draft.

    A provider attempt fails on timeout, on any provider error and on a
    candidate the schema validator rejects; the next provider is tried.
    Cost-limit errors and cancellation always propagate.
    """

    def __init__(self, providers: Sequence[StructuringOracle], timeout_seconds: float) -> None:
        if not providers:
            msg = "ProviderFallbackChain needs at least one provider"
            raise ValueError(msg)
        self.providers = list(providers)
        self.timeout_seconds = timeout_seconds

    async def structure(self, text: str, chunk_index: int | None = None) -> StructuredDraft:
        """Structure text with the first provider that succeeds.

        Raises:
            AllProvidersFailedError: With every provider's failure, when none succeeded.
            CostLimitExceededError: As soon as the document's cost ceiling is crossed.
        """
        schema = cv_draft_json_schema()
        failures: list[ProviderFailureError] = []

        for provider in self.providers:
            try:
                candidate = await asyncio.wait_for(
                    provider.propose(text, schema), timeout=self.timeout_seconds
                )
                draft = validate_cv_draft(candidate)
            except CostLimitExceededError:
                raise
            except TimeoutError as e:
                failure = ProviderFailureError(
                    provider.name, f"timed out after {self.timeout_seconds}s"
                )
                failure.__cause__ = e
            except DraftValidationError as e:
                failure = ProviderFailureError(provider.name, str(e))
                failure.__cause__ = e
            except Exception as e:
                failure = ProviderFailureError(provider.name, f"{type(e).__name__}: {e}")
                failure.__cause__ = e
            else:
                if failures:
                    logger.info(
                        "provider_fallback_succeeded",
                        provider=provider.name,
                        failed_providers=[f.provider for f in failures],
                        chunk_index=chunk_index,
                    )
                return StructuredDraft(draft=draft, provider=provider.name)

            failures.append(failure)
            logger.warning(
                "provider_failed",
                provider=provider.name,
                error=str(failure),
                chunk_index=chunk_index,
            )

        raise AllProvidersFailedError(failures) from failures[-1]
