"""Extractor agent: uploaded bytes to sanitized text."""

from __future__ import annotations

import time

import structlog

from cv_formatter_agents.agents.base import BaseAgent
from cv_formatter_agents.observability import bind_extraction_context
from cv_formatter_agents.tools.document_extractor import ExtractionOptions
from cv_formatter_core.state import PipelineState

logger = structlog.get_logger()


class ExtractorAgent(BaseAgent):
    """Extract plain text from the uploaded PDF, DOCX or XLSX."""

    agent_name = "extractor"

    async def run(self, state: PipelineState) -> PipelineState:
        """Populate state.extracted from state.request.document."""
        document = state.request.document
        self._log_start(
            {"mime_type": document.mime_type, "size_bytes": document.size_bytes}
        )
        start = time.monotonic()

        options = ExtractionOptions(
            min_pdf_text_chars=self.settings.min_pdf_text_chars,
            ocr_enabled=self.settings.ocr_enabled,
            ocr_language=self.settings.ocr_language,
            max_document_size_mb=self.settings.max_document_size_mb,
        )
        state.extracted = await self.toolkit.extractor.extract(
            document.data,
            document.mime_type,
            filename=document.filename,
            options=options,
        )
        bind_extraction_context(
            state.extracted.source_format,
            state.extracted.page_count,
            state.extracted.used_fallback_ocr,
        )

        if not state.extracted.text:
            logger.warning("extracted_text_empty", source_format=state.extracted.source_format)

        self._log_end(
            time.monotonic() - start,
            {
                "source_format": state.extracted.source_format,
                "chars": len(state.extracted.text),
                "pages": state.extracted.page_count,
            },
        )
        return state
