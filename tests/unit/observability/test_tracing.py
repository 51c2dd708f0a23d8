"""Tests for observability/tracing.py."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from cv_formatter_agents.observability import tracing
from cv_formatter_agents.observability.tracing import (
    configure_tracing,
    disable_tracing,
    get_tracer,
    trace_document_run,
)


def _make_settings(**overrides: object) -> SimpleNamespace:
    """Create a minimal mock settings object."""
    defaults: dict[str, object] = {
        "otel_exporter": "none",
        "otel_endpoint": "http://localhost:4317",
        "otel_service_name": "test-service",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.mark.unit
class TestConfigureTracing:
    """Tests for configure_tracing."""

    def test_configure_tracing_none(self) -> None:
        """'none' exporter leaves tracing disabled."""
        configure_tracing(_make_settings(otel_exporter="none"))  # type: ignore[arg-type]
        assert get_tracer() is None

    def test_configure_tracing_none_resets_active_tracer(self) -> None:
        """Reconfiguring with 'none' drops a previously active tracer."""
        tracing._tracer = MagicMock()
        configure_tracing(_make_settings(otel_exporter="none"))  # type: ignore[arg-type]
        assert get_tracer() is None

    def test_configure_tracing_console(self) -> None:
        """'console' exporter creates a tracer."""
        pytest.importorskip("opentelemetry.sdk")
        configure_tracing(_make_settings(otel_exporter="console"))  # type: ignore[arg-type]
        assert get_tracer() is not None
        disable_tracing()
        assert get_tracer() is None


@pytest.mark.unit
class TestTraceDocumentRun:
    """Tests for trace_document_run."""

    @pytest.mark.asyncio
    async def test_noop_when_disabled(self) -> None:
        """Context manager yields None when tracing is disabled."""
        disable_tracing()

        async with trace_document_run("doc_123") as span:
            assert span is None

    @pytest.mark.asyncio
    async def test_root_span_tagged(self) -> None:
        """With a tracer the root span carries the document id."""
        mock_span = MagicMock()
        mock_span.__enter__ = MagicMock(return_value=mock_span)
        mock_span.__exit__ = MagicMock(return_value=False)
        mock_tracer = MagicMock()
        mock_tracer.start_as_current_span.return_value = mock_span

        original_tracer = tracing._tracer
        tracing._tracer = mock_tracer
        try:
            async with trace_document_run("doc_123") as span:
                assert span is mock_span
        finally:
            tracing._tracer = original_tracer

        mock_tracer.start_as_current_span.assert_called_once_with("pipeline.document")
        mock_span.set_attribute.assert_called_once_with("pipeline.document_id", "doc_123")
