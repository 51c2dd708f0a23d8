"""Format dispatch, OCR fallback and sanitizing for uploaded documents."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import PurePath

import structlog

from cv_formatter_agents.tools.ocr import PdfOcr
from cv_formatter_agents.tools.office_parsers import DocxParser, XlsxParser
from cv_formatter_agents.tools.parsed import ParsedDocument
from cv_formatter_agents.tools.pdf_parser import PDFParser
from cv_formatter_agents.tools.text_sanitizer import sanitize_text
from cv_formatter_core.constants import EXTENSION_FORMATS, GENERIC_MIME_TYPES, MIME_TYPE_FORMATS
from cv_formatter_core.exceptions import UnsupportedFormatError
from cv_formatter_core.models.document import ExtractedText, SourceFormat

logger = structlog.get_logger()


@dataclass(frozen=True)
class ExtractionOptions:
    """Knobs of a single extraction."""

    min_pdf_text_chars: int = 50
    ocr_enabled: bool = True
    ocr_language: str = "eng"
    max_document_size_mb: int = 10


def resolve_format(mime_type: str | None, filename: str | None) -> SourceFormat:
    """Pick the parser for a MIME type, falling back to the file extension.

    The extension is consulted only when the MIME type is absent or generic.

    Raises:
        UnsupportedFormatError: If neither identifies a supported format.
    """
    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime in MIME_TYPE_FORMATS:
        return MIME_TYPE_FORMATS[mime]  # type: ignore[return-value]
    if mime in GENERIC_MIME_TYPES and filename:
        suffix = PurePath(filename).suffix.lower()
        if suffix in EXTENSION_FORMATS:
            return EXTENSION_FORMATS[suffix]  # type: ignore[return-value]
    msg = f"Unsupported document type: mime={mime_type!r}, filename={filename!r}"
    raise UnsupportedFormatError(msg)


class DocumentExtractor:
    """Turn uploaded bytes into sanitized plain text."""

    def __init__(
        self,
        pdf_parser: PDFParser | None = None,
        docx_parser: DocxParser | None = None,
        xlsx_parser: XlsxParser | None = None,
        ocr: PdfOcr | None = None,
    ) -> None:
        self.pdf_parser = pdf_parser or PDFParser()
        self.docx_parser = docx_parser or DocxParser()
        self.xlsx_parser = xlsx_parser or XlsxParser()
        self.ocr = ocr or PdfOcr()

    async def extract(
        self,
        data: bytes,
        mime_type: str | None,
        filename: str | None = None,
        options: ExtractionOptions | None = None,
    ) -> ExtractedText:
        """Extract text from a PDF, DOCX or XLSX upload.

        A readable document without text yields an empty ``text``; only
        unsupported, corrupt or encrypted documents raise.

        Raises:
            UnsupportedFormatError: Before any parsing, for unknown formats.
            CorruptDocumentError: If the parser cannot read the document.
            EncryptedDocumentError: For password-protected PDFs.
        """
        opts = options or ExtractionOptions()
        source_format = resolve_format(mime_type, filename)
        self._check_size(data, opts.max_document_size_mb)

        started = time.monotonic()
        used_ocr = False
        if source_format == "pdf":
            parsed, used_ocr = await self._extract_pdf(data, opts)
        elif source_format == "docx":
            parsed = await self.docx_parser.parse(data)
        else:
            parsed = await self.xlsx_parser.parse(data)

        text = sanitize_text(parsed.text)
        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "extraction_complete",
            source_format=source_format,
            chars=len(text),
            pages=parsed.page_count,
            used_ocr=used_ocr,
            duration_ms=duration_ms,
        )
        return ExtractedText(
            text=text,
            page_count=parsed.page_count,
            has_images=parsed.has_images,
            source_format=source_format,
            extraction_duration_ms=duration_ms,
            used_fallback_ocr=used_ocr,
            file_size_bytes=len(data),
        )

    async def _extract_pdf(
        self, data: bytes, opts: ExtractionOptions
    ) -> tuple[ParsedDocument, bool]:
        """Text layer first; OCR when it is shorter than the minimum."""
        parsed = await self.pdf_parser.parse(data, opts.min_pdf_text_chars)
        if len(parsed.text.strip()) >= opts.min_pdf_text_chars or not opts.ocr_enabled:
            return parsed, False

        logger.info("pdf_text_layer_missing", chars=len(parsed.text.strip()))
        ocr_text = await self.ocr.extract_text(data, opts.ocr_language)
        if len(ocr_text.strip()) > len(parsed.text.strip()):
            return (
                ParsedDocument(text=ocr_text, page_count=parsed.page_count, has_images=True),
                True,
            )
        return parsed, False

    def _check_size(self, data: bytes, max_size_mb: int) -> None:
        """Warn if the document is larger than max_size_mb."""
        size_mb = len(data) / (1024 * 1024)
        if size_mb > max_size_mb:
            logger.warning("large_document", size_mb=round(size_mb, 1))
