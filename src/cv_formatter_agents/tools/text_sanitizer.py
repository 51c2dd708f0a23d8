"""Whitespace, punctuation and bullet cleanup of extracted text."""

from __future__ import annotations

import re
import unicodedata

from cv_formatter_core.constants import BULLET_GLYPHS

_BULLET_CLASS = re.escape(BULLET_GLYPHS)

_HSPACE = re.compile(r"[ \t\f\v\u00a0]+")
_TRAILING = re.compile(r"[ \t]+\n|\n[ \t]+")
_BLANK_LINES = re.compile(r"\n{3,}")
_SPACE_BEFORE_PUNCT = re.compile(r"[ \t]+([,.;:!?])")
_GLUED_PUNCT = re.compile(r"([,;])(?=[^\W\d_])")
_BULLET = re.compile(rf"[ \t]*[{_BULLET_CLASS}][ \t]*")


def _bullet_line(m: re.Match[str]) -> str:
    glyph = m.group(0).strip()
    at_line_start = m.start() == 0 or m.string[m.start() - 1] == "\n"
    return f"{glyph} " if at_line_start else f"\n{glyph} "


def sanitize_text(text: str) -> str:
    """Normalize extracted text without losing its paragraph structure.

    - NFC unicode normalization and unified line endings
    - runs of spaces/tabs collapsed, line ends stripped
    - three or more newlines collapsed to one blank line
    - no space before punctuation, one space after ',' or ';' glued to a letter
    - every bullet glyph starts its own line followed by a single space
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HSPACE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    text = _GLUED_PUNCT.sub(r"\1 ", text)
    text = _BULLET.sub(_bullet_line, text)
    text = _TRAILING.sub("\n", text)
    text = _TRAILING.sub("\n", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()
