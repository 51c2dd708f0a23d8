"""Source document, extracted text and chunk models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SourceFormat = Literal["pdf", "docx", "xlsx"]


class RawDocument(BaseModel):
    """An uploaded document as handed over by the upload layer."""

    data: bytes = Field(repr=False, description="Raw file bytes")
    mime_type: str | None = Field(default=None, description="Declared MIME type")
    filename: str | None = Field(default=None, description="Original filename, metadata only")

    @property
    def size_bytes(self) -> int:
        """Size of the uploaded buffer."""
        return len(self.data)


class ExtractedText(BaseModel):
    """Plain text pulled from a document plus lightweight metadata."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Sanitized plain text, possibly empty")
    page_count: int = Field(ge=0, description="Pages (estimated for DOCX/XLSX)")
    has_images: bool = Field(default=False, description="Document embeds images")
    source_format: SourceFormat = Field(description="Format the text was extracted from")
    extraction_duration_ms: int = Field(ge=0, description="Wall time spent extracting")
    used_fallback_ocr: bool = Field(default=False, description="Text came from OCR")
    file_size_bytes: int = Field(default=0, ge=0, description="Size of the source buffer")


class TextChunk(BaseModel):
    """A bounded window of extracted text."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Position in document order")
    text: str = Field(description="Chunk content")
    start_offset: int = Field(ge=0, description="Offset of the first character in the source")
    overlap_with_previous: int = Field(
        default=0, ge=0, description="Characters shared with the previous chunk"
    )

    @property
    def end_offset(self) -> int:
        """Offset one past the last character."""
        return self.start_offset + len(self.text)
