"""PDF text extraction with fallback chain: pdfplumber -> pypdf."""

from __future__ import annotations

import asyncio
import io

import structlog

from cv_formatter_agents.tools.parsed import ParsedDocument
from cv_formatter_core.exceptions import CorruptDocumentError, EncryptedDocumentError

logger = structlog.get_logger()


class PDFParser:
    """Extract the text layer of a PDF with multiple fallback strategies."""

    def __init__(self, min_text_chars: int = 50) -> None:
        self.min_text_chars = min_text_chars

    async def parse(self, data: bytes, min_text_chars: int | None = None) -> ParsedDocument:
        """Extract text from PDF bytes.

        Tries pdfplumber first, then pypdf when the text layer is shorter
        than ``min_text_chars``. The longer of the two results is kept, so a
        scanned PDF comes back with little or no text for the OCR fallback.

        Raises:
            EncryptedDocumentError: If the PDF is password-protected.
            CorruptDocumentError: If neither library can open the file.
        """
        plumber = await self._try_pdfplumber(data)
        threshold = self.min_text_chars if min_text_chars is None else min_text_chars
        if plumber and len(plumber.text.strip()) >= threshold:
            return plumber

        fallback = await self._try_pypdf(data)
        candidates = [r for r in (plumber, fallback) if r is not None]
        if not candidates:
            msg = "PDF could not be read by pdfplumber or pypdf"
            raise CorruptDocumentError(msg)

        best = max(candidates, key=lambda r: len(r.text.strip()))
        # pdfplumber is the only one that reports embedded images
        has_images = any(r.has_images for r in candidates)
        return ParsedDocument(text=best.text, page_count=best.page_count, has_images=has_images)

    async def _try_pdfplumber(self, data: bytes) -> ParsedDocument | None:
        """Try extracting text with pdfplumber."""
        try:
            import pdfplumber

            def _extract() -> ParsedDocument:
                pages_text: list[str] = []
                has_images = False
                with pdfplumber.open(io.BytesIO(data)) as pdf:
                    for page in pdf.pages:
                        text = page.extract_text()
                        if text:
                            pages_text.append(text)
                        if page.images:
                            has_images = True
                    page_count = len(pdf.pages)
                return ParsedDocument(
                    text="\n\n".join(pages_text),
                    page_count=page_count,
                    has_images=has_images,
                )

            return await asyncio.to_thread(_extract)
        except Exception as e:
            if "password" in str(e).lower() or "encrypted" in str(e).lower():
                msg = "PDF is password-protected"
                raise EncryptedDocumentError(msg) from e
            logger.debug("pdfplumber_fallback", error=str(e))
            return None

    async def _try_pypdf(self, data: bytes) -> ParsedDocument | None:
        """Try extracting text with pypdf (lightweight fallback)."""
        try:
            from pypdf import PdfReader

            def _extract() -> ParsedDocument:
                reader = PdfReader(io.BytesIO(data))
                if reader.is_encrypted:
                    msg = "PDF is password-protected"
                    raise EncryptedDocumentError(msg)
                pages_text: list[str] = []
                for page in reader.pages:
                    text = page.extract_text()
                    if text:
                        pages_text.append(text)
                return ParsedDocument(text="\n\n".join(pages_text), page_count=len(reader.pages))

            return await asyncio.to_thread(_extract)
        except EncryptedDocumentError:
            raise
        except Exception as e:
            logger.debug("pypdf_fallback", error=str(e))
            return None
