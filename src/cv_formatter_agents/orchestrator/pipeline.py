"""Sequential async pipeline: extract, structure, normalize, merge, check."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from cv_formatter_agents.agents.base import AgentToolkit
from cv_formatter_agents.agents.compliance import ComplianceAgent
from cv_formatter_agents.agents.extractor import ExtractorAgent
from cv_formatter_agents.agents.merger import MergerAgent
from cv_formatter_agents.agents.normalizer import NormalizerAgent
from cv_formatter_agents.agents.structurer import StructurerAgent
from cv_formatter_agents.observability import (
    CostTracker,
    bind_document_context,
    clear_document_context,
    get_tracer,
    trace_document_run,
    track_costs,
)
from cv_formatter_agents.orchestrator.fallback import ProviderFallbackChain
from cv_formatter_agents.providers.factories import create_providers
from cv_formatter_agents.rules.engine import EHSRuleEngine
from cv_formatter_agents.tools.document_extractor import DocumentExtractor
from cv_formatter_core.exceptions import CvFormatterError, PipelineTimeoutError
from cv_formatter_core.models.document import RawDocument
from cv_formatter_core.models.run import ProcessingRequest, ProcessingResult
from cv_formatter_core.state import PipelineState

if TYPE_CHECKING:
    from cv_formatter_agents.agents.base import BaseAgent
    from cv_formatter_core.config.settings import Settings
    from cv_formatter_core.interfaces.oracle import StructuringOracle
    from cv_formatter_core.models.cv_draft import CvDraft

logger = structlog.get_logger()

PIPELINE_STEPS: list[tuple[str, type[BaseAgent]]] = [
    ("extract_text", ExtractorAgent),
    ("structure_text", StructurerAgent),
    ("normalize_drafts", NormalizerAgent),
    ("merge_drafts", MergerAgent),
    ("check_compliance", ComplianceAgent),
]


class Pipeline:
    """Turn one uploaded résumé into a normalized CV draft and compliance report.

    Every call to ``process`` owns its own PipelineState, so one Pipeline can
    serve concurrent documents.
    """

    def __init__(
        self,
        settings: Settings,
        providers: Sequence[StructuringOracle] | None = None,
        extractor: DocumentExtractor | None = None,
    ) -> None:
        """Initialize with settings; providers default to create_providers()."""
        self.settings = settings
        oracles = list(providers) if providers is not None else create_providers(settings)
        self.toolkit = AgentToolkit(
            extractor=extractor or DocumentExtractor(),
            chain=ProviderFallbackChain(oracles, settings.oracle_timeout_seconds),
            engine=EHSRuleEngine(
                bullet_split_threshold=settings.bullet_split_threshold_chars,
                compliance_penalty=settings.compliance_penalty_per_issue,
            ),
        )

    async def process(
        self,
        data: bytes,
        mime_type: str | None,
        filename: str | None = None,
        candidate_id: str | None = None,
        client_label: str | None = None,
    ) -> ProcessingResult:
        """Run every step on one document.

        Raises:
            ExtractionFailedError: If the document cannot be read.
            StructuringFailedError: If no provider could structure the text.
            DraftValidationError: If a merged or normalized draft is invalid.
            CostLimitExceededError: If oracle spend crosses the document ceiling.
            PipelineTimeoutError: If a step exceeds agent_timeout_seconds.
        """
        request = ProcessingRequest(
            document=RawDocument(data=data, mime_type=mime_type, filename=filename),
            candidate_id=candidate_id,
            client_label=client_label,
        )
        return await self.run(request)

    async def run(self, request: ProcessingRequest) -> ProcessingResult:
        """Execute the full pipeline for a prepared request."""
        start = time.monotonic()
        state = PipelineState(request=request)
        tracker = CostTracker()
        bind_document_context(request.document_id)

        try:
            logger.info("pipeline_start", document_id=request.document_id)

            async with trace_document_run(request.document_id) as root_span:
                with track_costs(
                    tracker,
                    state,
                    max_cost=self.settings.max_cost_per_document_usd,
                    warn_threshold=self.settings.warn_cost_threshold_usd,
                ):
                    for step_name, agent_cls in PIPELINE_STEPS:
                        state = await self._run_agent_step(step_name, agent_cls, state)

                self._set_root_span_attrs(root_span, state)

            duration = time.monotonic() - start
            self._log_summary(state, tracker, duration)
            return state.build_result(duration_seconds=duration)
        except CvFormatterError as e:
            logger.error(
                "pipeline_failed",
                stage=e.stage,
                error_type=type(e).__name__,
                error=str(e),
                completed_steps=state.completed_steps,
            )
            self._log_summary(state, tracker, time.monotonic() - start)
            raise
        finally:
            clear_document_context()

    async def _run_agent_step(
        self,
        step_name: str,
        agent_cls: type[BaseAgent],
        state: PipelineState,
    ) -> PipelineState:
        """Execute a single agent step, optionally wrapped in a trace span."""
        tracer = get_tracer()
        span = None
        if tracer is not None:
            span = tracer.start_span(f"agent.{step_name}")
            span.set_attribute("agent.name", step_name)

        try:
            agent = agent_cls(self.settings, self.toolkit)
            state = await asyncio.wait_for(
                agent.run(state),
                timeout=self.settings.agent_timeout_seconds,
            )
            state.completed_steps.append(step_name)
            if span is not None:
                span.set_attribute("agent.status", "ok")
                span.set_attribute("agent.tokens", state.total_tokens)
            return state

        except TimeoutError as e:
            logger.error(
                "agent_timeout",
                step=step_name,
                timeout=self.settings.agent_timeout_seconds,
            )
            if span is not None:
                span.set_attribute("agent.status", "error")
                span.set_attribute("agent.error", "timeout")
            raise PipelineTimeoutError(step_name, self.settings.agent_timeout_seconds) from e

        except Exception as e:
            if span is not None:
                span.set_attribute("agent.status", "error")
                span.set_attribute("agent.error", str(e))
            raise

        finally:
            if span is not None:
                span.end()

    @staticmethod
    def _set_root_span_attrs(root_span: object | None, state: PipelineState) -> None:
        """Set summary attributes on the root document span."""
        if root_span is None:
            return
        root_span.set_attribute("pipeline.total_tokens", state.total_tokens)  # type: ignore[attr-defined]
        root_span.set_attribute(  # type: ignore[attr-defined]
            "pipeline.total_cost_usd",
            round(state.total_cost_usd, 4),
        )
        root_span.set_attribute("pipeline.chunks", len(state.chunks))  # type: ignore[attr-defined]
        root_span.set_attribute("pipeline.errors", len(state.errors))  # type: ignore[attr-defined]
        if state.compliance is not None:
            root_span.set_attribute("pipeline.compliance_score", state.compliance.score)  # type: ignore[attr-defined]

    @staticmethod
    def _log_summary(state: PipelineState, tracker: CostTracker, duration: float) -> None:
        """Log a structured cost and performance summary."""
        logger.info(
            "pipeline_summary",
            total_tokens=state.total_tokens,
            total_cost_usd=round(state.total_cost_usd, 4),
            duration_seconds=round(duration, 2),
            chunks=len(state.chunks),
            failed_chunks=state.failed_chunks,
            errors=len(state.errors),
            oracle_calls=tracker.summary()["total_calls"],
        )


async def process_document(
    settings: Settings,
    data: bytes,
    mime_type: str | None,
    filename: str | None = None,
    providers: Sequence[StructuringOracle] | None = None,
) -> CvDraft:
    """Convenience wrapper returning only the final CV draft."""
    result = await Pipeline(settings, providers=providers).process(
        data, mime_type, filename=filename
    )
    return result.draft
