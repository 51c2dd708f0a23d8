"""Oracle cost tracking and token usage extraction."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

import structlog

from cv_formatter_core.constants import TOKEN_PRICES
from cv_formatter_core.exceptions import CostLimitExceededError
from cv_formatter_core.state import PipelineState

logger = structlog.get_logger()


@dataclass
class LLMCallMetrics:
    """Metrics for a single oracle call."""

    model: str
    input_tokens: int
    output_tokens: int
    duration_seconds: float
    provider: str


def estimate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """USD cost of a call, 0.0 for models without a known price."""
    prices = TOKEN_PRICES.get(model)
    if not prices:
        return 0.0
    return (
        input_tokens * prices["input"] / 1_000_000
        + output_tokens * prices["output"] / 1_000_000
    )


@dataclass
class CostTracker:
    """Accumulates oracle call metrics and enforces cost guardrails."""

    calls: list[LLMCallMetrics] = field(default_factory=list)

    def record_call(
        self,
        metrics: LLMCallMetrics,
        state: PipelineState,
        max_cost: float,
        warn_threshold: float,
    ) -> None:
        """Record a call, update state, and enforce cost limits.

        Raises CostLimitExceededError if accumulated cost exceeds max_cost.
        Logs a warning when cost exceeds warn_threshold.
        """
        self.calls.append(metrics)
        state.total_tokens += metrics.input_tokens + metrics.output_tokens
        state.total_cost_usd += estimate_cost(
            metrics.model, metrics.input_tokens, metrics.output_tokens
        )

        if state.total_cost_usd > max_cost:
            msg = (
                f"Document cost ${state.total_cost_usd:.4f} exceeds limit ${max_cost:.2f}"
            )
            raise CostLimitExceededError(msg)

        if state.total_cost_usd > warn_threshold:
            logger.warning(
                "cost_warning",
                current_cost=round(state.total_cost_usd, 4),
                threshold=warn_threshold,
                limit=max_cost,
            )

    def summary(self) -> dict[str, object]:
        """Return aggregated cost summary for structured logging."""
        total_tokens = 0
        cost_by_model: dict[str, float] = {}
        calls_by_provider: dict[str, int] = {}

        for call in self.calls:
            total_tokens += call.input_tokens + call.output_tokens
            cost = estimate_cost(call.model, call.input_tokens, call.output_tokens)
            cost_by_model[call.model] = cost_by_model.get(call.model, 0.0) + cost
            calls_by_provider[call.provider] = calls_by_provider.get(call.provider, 0) + 1

        return {
            "total_calls": len(self.calls),
            "total_tokens": total_tokens,
            "calls_by_provider": calls_by_provider,
            "cost_by_model": cost_by_model,
            "total_cost_usd": round(sum(cost_by_model.values()), 6),
        }


@dataclass
class _ActiveTracking:
    tracker: CostTracker
    state: PipelineState
    max_cost: float
    warn_threshold: float


_active: ContextVar[_ActiveTracking | None] = ContextVar("cost_tracking", default=None)


@contextmanager
def track_costs(
    tracker: CostTracker,
    state: PipelineState,
    max_cost: float,
    warn_threshold: float,
) -> Iterator[CostTracker]:
    """Route every record_llm_call() made in this context to one document.

    Tasks spawned inside the block inherit the binding.
    """
    token = _active.set(_ActiveTracking(tracker, state, max_cost, warn_threshold))
    try:
        yield tracker
    finally:
        _active.reset(token)


def record_llm_call(metrics: LLMCallMetrics) -> None:
    """Record a call against the document bound by track_costs().

    Outside a tracking context the call is only logged.

    Raises:
        CostLimitExceededError: If the document's cost ceiling is crossed.
    """
    active = _active.get()
    if active is None:
        logger.debug("llm_call_untracked", provider=metrics.provider, model=metrics.model)
        return
    active.tracker.record_call(metrics, active.state, active.max_cost, active.warn_threshold)


def extract_token_usage(response: object) -> tuple[int, int]:
    """Extract input/output token counts from an instructor response.

    Instructor keeps the raw SDK response in `_raw_response`. Anthropic
    reports `input_tokens`/`output_tokens`, OpenAI-compatible APIs report
    `prompt_tokens`/`completion_tokens`. Falls back to (0, 0).
    """
    raw = getattr(response, "_raw_response", None)
    if raw is None:
        return (0, 0)

    usage = getattr(raw, "usage", None)
    if usage is None:
        return (0, 0)

    input_tokens = getattr(usage, "input_tokens", None)
    output_tokens = getattr(usage, "output_tokens", None)
    if input_tokens is None and output_tokens is None:
        input_tokens = getattr(usage, "prompt_tokens", 0)
        output_tokens = getattr(usage, "completion_tokens", 0)
    return (int(input_tokens or 0), int(output_tokens or 0))
