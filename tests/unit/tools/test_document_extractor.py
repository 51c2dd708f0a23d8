"""Tests for format dispatch and OCR fallback."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cv_formatter_agents.tools.document_extractor import (
    DocumentExtractor,
    ExtractionOptions,
    resolve_format,
)
from cv_formatter_agents.tools.parsed import ParsedDocument
from cv_formatter_core.exceptions import CorruptDocumentError, UnsupportedFormatError

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _extractor(
    pdf: ParsedDocument | None = None,
    ocr_text: str = "",
    docx: ParsedDocument | None = None,
    xlsx: ParsedDocument | None = None,
) -> DocumentExtractor:
    """Build a DocumentExtractor over mocked parsers."""
    pdf_parser = MagicMock()
    pdf_parser.parse = AsyncMock(return_value=pdf or ParsedDocument(text="", page_count=1))
    docx_parser = MagicMock()
    docx_parser.parse = AsyncMock(return_value=docx)
    xlsx_parser = MagicMock()
    xlsx_parser.parse = AsyncMock(return_value=xlsx)
    ocr = MagicMock()
    ocr.extract_text = AsyncMock(return_value=ocr_text)
    return DocumentExtractor(pdf_parser, docx_parser, xlsx_parser, ocr)


@pytest.mark.unit
class TestResolveFormat:
    """Test MIME and extension dispatch."""

    def test_known_mime(self) -> None:
        """Recognized MIME types decide the format."""
        assert resolve_format("application/pdf", None) == "pdf"
        assert resolve_format(DOCX_MIME, "cv.pdf") == "docx"
        assert resolve_format(f"{XLSX_MIME}; charset=binary", None) == "xlsx"

    def test_generic_mime_uses_extension(self) -> None:
        """Octet-stream and missing MIME fall back to the extension."""
        assert resolve_format("application/octet-stream", "CV.PDF") == "pdf"
        assert resolve_format(None, "cv.docx") == "docx"
        assert resolve_format("", "sheet.xlsm") == "xlsx"

    def test_unknown_mime_ignores_extension(self) -> None:
        """A specific but unsupported MIME type is not overridden by the name."""
        with pytest.raises(UnsupportedFormatError):
            resolve_format("image/png", "cv.pdf")

    def test_nothing_to_go_on(self) -> None:
        """No MIME type and no usable extension is unsupported."""
        with pytest.raises(UnsupportedFormatError):
            resolve_format(None, None)
        with pytest.raises(UnsupportedFormatError):
            resolve_format("application/octet-stream", "cv.doc")


@pytest.mark.unit
class TestDocumentExtractor:
    """Test DocumentExtractor.extract."""

    @pytest.mark.asyncio
    async def test_pdf_text_layer(self) -> None:
        """A PDF with a text layer is sanitized and OCR is skipped."""
        text = "Jane  Doe\n\n\n\nLead Developer at Acme Corp since June 2019 , Leeds"
        extractor = _extractor(pdf=ParsedDocument(text=text, page_count=3))
        result = await extractor.extract(b"%PDF", "application/pdf", "cv.pdf")

        assert result.text == "Jane Doe\n\nLead Developer at Acme Corp since June 2019, Leeds"
        assert result.page_count == 3
        assert result.source_format == "pdf"
        assert not result.used_fallback_ocr
        assert result.file_size_bytes == 4
        extractor.ocr.extract_text.assert_not_awaited()  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_scanned_pdf_uses_ocr(self) -> None:
        """Short text layers trigger OCR, whose longer text is kept."""
        extractor = _extractor(
            pdf=ParsedDocument(text="1", page_count=2),
            ocr_text="Jane Doe\nLead Developer at Acme Corp since June 2019 in Leeds",
        )
        result = await extractor.extract(b"%PDF", "application/pdf")

        assert result.used_fallback_ocr
        assert result.has_images
        assert result.page_count == 2
        assert result.text.startswith("Jane Doe")
        extractor.ocr.extract_text.assert_awaited_once_with(b"%PDF", "eng")  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_ocr_disabled(self) -> None:
        """With OCR disabled a scanned PDF yields its little text."""
        extractor = _extractor(pdf=ParsedDocument(text="1", page_count=1), ocr_text="x" * 100)
        result = await extractor.extract(
            b"%PDF", "application/pdf", options=ExtractionOptions(ocr_enabled=False)
        )

        assert result.text == "1"
        assert not result.used_fallback_ocr

    @pytest.mark.asyncio
    async def test_empty_ocr_keeps_text_layer(self) -> None:
        """OCR that finds nothing does not replace the text layer."""
        extractor = _extractor(pdf=ParsedDocument(text="Page 1", page_count=1), ocr_text="")
        result = await extractor.extract(b"%PDF", "application/pdf")

        assert result.text == "Page 1"
        assert not result.used_fallback_ocr

    @pytest.mark.asyncio
    async def test_options_forwarded(self) -> None:
        """Per-call minimum and language reach the parser and OCR."""
        extractor = _extractor(pdf=ParsedDocument(text="", page_count=1))
        await extractor.extract(
            b"%PDF",
            "application/pdf",
            options=ExtractionOptions(min_pdf_text_chars=10, ocr_language="deu"),
        )
        extractor.pdf_parser.parse.assert_awaited_once_with(b"%PDF", 10)  # type: ignore[attr-defined]
        extractor.ocr.extract_text.assert_awaited_once_with(b"%PDF", "deu")  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_docx_dispatch(self) -> None:
        """DOCX uploads go to the DOCX parser."""
        extractor = _extractor(docx=ParsedDocument(text="Jane Doe", page_count=1))
        result = await extractor.extract(b"PK", DOCX_MIME)

        assert result.source_format == "docx"
        assert result.text == "Jane Doe"
        extractor.pdf_parser.parse.assert_not_awaited()  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_xlsx_by_extension(self) -> None:
        """A generic MIME type with an .xlsx name goes to the XLSX parser."""
        extractor = _extractor(xlsx=ParsedDocument(text="Name | Jane", page_count=1))
        result = await extractor.extract(b"PK", "application/octet-stream", "cv.xlsx")

        assert result.source_format == "xlsx"
        assert result.text == "Name | Jane"

    @pytest.mark.asyncio
    async def test_unsupported_before_parsing(self) -> None:
        """Unsupported formats raise before any parser runs."""
        extractor = _extractor()
        with pytest.raises(UnsupportedFormatError):
            await extractor.extract(b"GIF89a", "image/gif", "cv.gif")
        extractor.pdf_parser.parse.assert_not_awaited()  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_parser_errors_propagate(self) -> None:
        """Corrupt documents surface as CorruptDocumentError."""
        extractor = _extractor()
        extractor.docx_parser.parse.side_effect = CorruptDocumentError("bad zip")  # type: ignore[attr-defined]
        with pytest.raises(CorruptDocumentError):
            await extractor.extract(b"PK", DOCX_MIME)

    @pytest.mark.asyncio
    async def test_large_document_warns(self) -> None:
        """Documents above the size limit log a warning but are processed."""
        extractor = _extractor(pdf=ParsedDocument(text="A" * 60, page_count=1))
        data = b"0" * (2 * 1024 * 1024)
        with patch("cv_formatter_agents.tools.document_extractor.logger") as mock_logger:
            await extractor.extract(
                data, "application/pdf", options=ExtractionOptions(max_document_size_mb=1)
            )
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == "large_document"
