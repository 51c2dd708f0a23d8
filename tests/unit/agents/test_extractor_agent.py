"""Tests for ExtractorAgent."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cv_formatter_agents.agents.extractor import ExtractorAgent
from cv_formatter_agents.tools.document_extractor import ExtractionOptions
from cv_formatter_core.exceptions import UnsupportedFormatError
from tests.mocks.mock_factories import make_extracted_text, make_pipeline_state, make_toolkit
from tests.mocks.mock_settings import make_settings


def _extractor(**extract_kwargs: object) -> MagicMock:
    extractor = MagicMock()
    extractor.extract = AsyncMock(**extract_kwargs)
    return extractor


@pytest.mark.unit
class TestExtractorAgent:
    """Test ExtractorAgent."""

    @pytest.mark.asyncio
    async def test_populates_extracted_text(self) -> None:
        """The uploaded document is handed to the extractor with settings-derived options."""
        extracted = make_extracted_text("Jane Doe\nEngineer")
        extractor = _extractor(return_value=extracted)
        settings = make_settings(min_pdf_text_chars=80, ocr_enabled=False, max_document_size_mb=4)
        agent = ExtractorAgent(settings, make_toolkit(extractor=extractor))
        state = make_pipeline_state()

        result = await agent.run(state)

        assert result.extracted is extracted
        call = extractor.extract.call_args
        assert call.args == (state.request.document.data, "application/pdf")
        assert call.kwargs["filename"] == "cv.pdf"
        assert call.kwargs["options"] == ExtractionOptions(
            min_pdf_text_chars=80, ocr_enabled=False, ocr_language="eng", max_document_size_mb=4
        )

    @pytest.mark.asyncio
    async def test_empty_text_warns(self) -> None:
        """An empty extraction is kept but logged."""
        extractor = _extractor(return_value=make_extracted_text(""))
        agent = ExtractorAgent(make_settings(), make_toolkit(extractor=extractor))

        with patch("cv_formatter_agents.agents.extractor.logger") as mock_logger:
            result = await agent.run(make_pipeline_state())

        assert result.extracted is not None
        assert result.extracted.text == ""
        mock_logger.warning.assert_called_once_with("extracted_text_empty", source_format="pdf")

    @pytest.mark.asyncio
    async def test_extraction_facts_bound_to_log_context(self) -> None:
        """Format, pages and OCR use are bound for later log entries."""
        extracted = make_extracted_text(source_format="docx", page_count=3, used_fallback_ocr=False)
        agent = ExtractorAgent(make_settings(), make_toolkit(extractor=_extractor(return_value=extracted)))

        with patch("cv_formatter_agents.agents.extractor.bind_extraction_context") as mock_bind:
            await agent.run(make_pipeline_state())

        mock_bind.assert_called_once_with("docx", 3, False)

    @pytest.mark.asyncio
    async def test_extraction_error_propagates(self) -> None:
        """Extraction failures are fatal for the run."""
        extractor = _extractor(side_effect=UnsupportedFormatError("image/png"))
        agent = ExtractorAgent(make_settings(), make_toolkit(extractor=extractor))
        state = make_pipeline_state()

        with pytest.raises(UnsupportedFormatError):
            await agent.run(state)

        assert state.extracted is None
