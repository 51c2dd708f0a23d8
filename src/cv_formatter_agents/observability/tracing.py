"""OpenTelemetry tracing for pipeline steps and document runs."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from cv_formatter_core.config.settings import Settings

logger = structlog.get_logger()

# Set by configure_tracing(); None while tracing is disabled
_tracer: Any = None


def configure_tracing(settings: Settings) -> None:
    """Configure OpenTelemetry tracing based on settings.

    All OTEL imports are deferred so the SDK is only needed when an
    exporter is selected.
    """
    global _tracer

    if settings.otel_exporter == "none":
        disable_tracing()
        return

    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider

    resource = Resource.create({"service.name": settings.otel_service_name})
    provider = TracerProvider(resource=resource)

    if settings.otel_exporter == "console":
        from opentelemetry.sdk.trace.export import (
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    elif settings.otel_exporter == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        exporter = OTLPSpanExporter(endpoint=settings.otel_endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer("ehs-cv-formatter")
    logger.info("tracing_configured", exporter=settings.otel_exporter)


def disable_tracing() -> None:
    """Turn span creation off."""
    global _tracer
    _tracer = None


def get_tracer() -> Any:
    """Return the active tracer, or None when tracing is disabled."""
    return _tracer


@asynccontextmanager
async def trace_document_run(document_id: str) -> AsyncGenerator[Any, None]:
    """Root span covering the processing of one document.

    Yields the span (or None if tracing is disabled).
    """
    if _tracer is None:
        yield None
        return

    with _tracer.start_as_current_span("pipeline.document") as span:
        span.set_attribute("pipeline.document_id", document_id)
        yield span
