"""DOCX (python-docx) and XLSX (openpyxl) text extraction."""

from __future__ import annotations

import asyncio
import io
import math

import structlog

from cv_formatter_agents.tools.parsed import ParsedDocument
from cv_formatter_core.constants import ROWS_PER_PAGE, SHEET_SEPARATOR, WORDS_PER_PAGE
from cv_formatter_core.exceptions import CorruptDocumentError

logger = structlog.get_logger()


class DocxParser:
    """Extract paragraphs and table cells from a Word document."""

    async def parse(self, data: bytes) -> ParsedDocument:
        """Read a .docx file.

        Paragraph text comes first, then each table row with its cells
        joined by ' | '. Page count is estimated from the word count.

        Raises:
            CorruptDocumentError: If the package cannot be opened.
        """
        try:
            from docx import Document

            doc = await asyncio.to_thread(Document, io.BytesIO(data))
        except Exception as e:
            msg = f"DOCX could not be opened: {e}"
            raise CorruptDocumentError(msg) from e

        parts = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells: list[str] = []
                for cell in row.cells:
                    # Merged cells repeat the same text
                    text = cell.text.strip()
                    if text and text not in cells:
                        cells.append(text)
                if cells:
                    parts.append(" | ".join(cells))

        has_images = any("image" in rel.reltype for rel in doc.part.rels.values())
        text = "\n".join(parts)
        words = len(text.split())
        logger.debug("docx_parsed", paragraphs=len(doc.paragraphs), tables=len(doc.tables))
        return ParsedDocument(
            text=text,
            page_count=max(1, math.ceil(words / WORDS_PER_PAGE)),
            has_images=has_images,
        )


class XlsxParser:
    """Flatten every sheet of a workbook into text rows."""

    async def parse(self, data: bytes) -> ParsedDocument:
        """Read an .xlsx/.xlsm workbook.

        Each row's non-empty cells are joined by ' | ', one row per line;
        sheets are separated by a '---' line. Page count assumes 40 rows
        per page.

        Raises:
            CorruptDocumentError: If the workbook cannot be opened.
        """
        try:
            from openpyxl import load_workbook

            def _extract() -> tuple[str, int]:
                wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
                try:
                    sheets: list[str] = []
                    row_count = 0
                    for ws in wb.worksheets:
                        lines = []
                        for row in ws.iter_rows(values_only=True):
                            values = [str(v).strip() for v in row if v is not None]
                            values = [v for v in values if v]
                            if values:
                                lines.append(" | ".join(values))
                        row_count += len(lines)
                        if lines:
                            sheets.append("\n".join(lines))
                finally:
                    wb.close()
                return f"\n{SHEET_SEPARATOR}\n".join(sheets), row_count

            text, row_count = await asyncio.to_thread(_extract)
        except Exception as e:
            msg = f"Spreadsheet could not be opened: {e}"
            raise CorruptDocumentError(msg) from e

        return ParsedDocument(text=text, page_count=max(1, math.ceil(row_count / ROWS_PER_PAGE)))
