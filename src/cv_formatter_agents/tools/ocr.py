"""OCR fallback for scanned PDFs: pdf2image + pytesseract."""

from __future__ import annotations

import asyncio

import structlog

logger = structlog.get_logger()


class PdfOcr:
    """Rasterize PDF pages and read them with Tesseract.

    OCR is best effort: a missing Tesseract/Poppler install or any
    rendering error is logged and yields an empty string.
    """

    def __init__(self, language: str = "eng") -> None:
        self.language = language

    async def extract_text(self, data: bytes, language: str | None = None) -> str:
        """Return the OCR text of every page, blank-line separated."""
        try:
            import pytesseract
            from pdf2image import convert_from_bytes

            def _ocr() -> str:
                texts: list[str] = []
                for image in convert_from_bytes(data):
                    text = pytesseract.image_to_string(image, lang=language or self.language)
                    if text and text.strip():
                        texts.append(text.strip())
                return "\n\n".join(texts)

            text = await asyncio.to_thread(_ocr)
        except Exception as e:
            logger.warning("ocr_failed", error=str(e))
            return ""

        logger.info("ocr_complete", chars=len(text))
        return text
