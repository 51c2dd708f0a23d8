"""Observability: structured logging, tracing, and cost tracking."""

from cv_formatter_agents.observability.cost_tracker import (
    CostTracker,
    LLMCallMetrics,
    record_llm_call,
    track_costs,
)
from cv_formatter_agents.observability.logging import (
    bind_document_context,
    bind_extraction_context,
    chunk_log_context,
    clear_document_context,
    configure_logging,
)
from cv_formatter_agents.observability.tracing import (
    configure_tracing,
    disable_tracing,
    get_tracer,
    trace_document_run,
)

__all__ = [
    "CostTracker",
    "LLMCallMetrics",
    "bind_document_context",
    "bind_extraction_context",
    "chunk_log_context",
    "clear_document_context",
    "configure_logging",
    "configure_tracing",
    "disable_tracing",
    "get_tracer",
    "record_llm_call",
    "trace_document_run",
    "track_costs",
]
