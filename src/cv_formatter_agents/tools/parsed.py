"""Raw output shared by the format-specific parsers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParsedDocument:
    """Unsanitized text and layout facts read from one document."""

    text: str
    page_count: int
    has_images: bool = False
