"""Tests for DOCX and XLSX parsers."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from cv_formatter_agents.tools.office_parsers import DocxParser, XlsxParser
from cv_formatter_core.exceptions import CorruptDocumentError


def _paragraph(text: str) -> MagicMock:
    p = MagicMock()
    p.text = text
    return p


def _row(*cells: str) -> MagicMock:
    row = MagicMock()
    row.cells = [_paragraph(c) for c in cells]
    return row


def _mock_document(
    paragraphs: list[str],
    rows: list[MagicMock] | None = None,
    reltypes: list[str] | None = None,
) -> MagicMock:
    doc = MagicMock()
    doc.paragraphs = [_paragraph(t) for t in paragraphs]
    table = MagicMock()
    table.rows = rows or []
    doc.tables = [table] if rows else []
    rels = {f"rId{i}": MagicMock(reltype=r) for i, r in enumerate(reltypes or [])}
    doc.part.rels = rels
    return doc


@pytest.mark.unit
class TestDocxParser:
    """Test Word document extraction."""

    @pytest.mark.asyncio
    async def test_paragraphs_then_tables(self) -> None:
        """Paragraphs come first, then table rows joined by ' | '."""
        doc = _mock_document(
            ["Jane Doe", "  ", "Lead Developer"],
            rows=[_row("Skills", "Python"), _row("Merged", "Merged", "Cell")],
        )
        with patch("docx.Document", return_value=doc):
            result = await DocxParser().parse(b"PK")

        assert result.text == "Jane Doe\nLead Developer\nSkills | Python\nMerged | Cell"
        assert result.page_count == 1
        assert not result.has_images

    @pytest.mark.asyncio
    async def test_images_detected(self) -> None:
        """Image relationships set has_images."""
        doc = _mock_document(
            ["Jane"],
            reltypes=[
                "http://schemas.openxmlformats.org/officeDocument/2006/relationships/styles",
                "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image",
            ],
        )
        with patch("docx.Document", return_value=doc):
            result = await DocxParser().parse(b"PK")

        assert result.has_images

    @pytest.mark.asyncio
    async def test_page_estimate(self) -> None:
        """Pages are estimated at 500 words each."""
        doc = _mock_document(["word " * 1200])
        with patch("docx.Document", return_value=doc):
            result = await DocxParser().parse(b"PK")

        assert result.page_count == 3

    @pytest.mark.asyncio
    async def test_corrupt_raises(self) -> None:
        """A package that cannot be opened raises CorruptDocumentError."""
        with patch("docx.Document", side_effect=ValueError("not a zip file")):
            with pytest.raises(CorruptDocumentError, match="DOCX could not be opened"):
                await DocxParser().parse(b"garbage")


@pytest.mark.unit
class TestXlsxParser:
    """Test workbook extraction."""

    @pytest.mark.asyncio
    async def test_sheets_flattened(self) -> None:
        """Rows become ' | ' lines and sheets are separated by '---'."""
        sheet1 = MagicMock()
        sheet1.iter_rows.return_value = [("Name", "Jane Doe"), (None, None), ("Role", " ", 3)]
        sheet2 = MagicMock()
        sheet2.iter_rows.return_value = [("Python",)]
        empty = MagicMock()
        empty.iter_rows.return_value = []
        wb = MagicMock()
        wb.worksheets = [sheet1, empty, sheet2]

        with patch("openpyxl.load_workbook", return_value=wb) as mock_load:
            result = await XlsxParser().parse(b"PK")

        assert result.text == "Name | Jane Doe\nRole | 3\n---\nPython"
        assert result.page_count == 1
        assert mock_load.call_args.kwargs == {"read_only": True, "data_only": True}
        wb.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_corrupt_raises(self) -> None:
        """A workbook that cannot be opened raises CorruptDocumentError."""
        with patch("openpyxl.load_workbook", side_effect=KeyError("xl/workbook.xml")):
            with pytest.raises(CorruptDocumentError, match="Spreadsheet could not be opened"):
                await XlsxParser().parse(b"garbage")
