"""Boundary-aware splitting of oversized texts into overlapping chunks."""

from __future__ import annotations

import re
from collections.abc import Iterator

from cv_formatter_core.constants import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE
from cv_formatter_core.models.document import TextChunk

_SENTENCE_END = re.compile(r"[.!?][\"')\]]?\s")


def _last_match(pattern: re.Pattern[str], text: str, lo: int, hi: int) -> int | None:
    """End offset of the last match of pattern fully inside text[lo:hi]."""
    cut = None
    for m in pattern.finditer(text, lo, hi):
        cut = m.end()
    return cut


def _find_cut(text: str, end: int, min_cut: int) -> int:
    """Best cut position in (min_cut, end]: paragraph, sentence, line, word."""
    para = text.rfind("\n\n", min_cut, end)
    if para != -1:
        return para + 2
    sentence = _last_match(_SENTENCE_END, text, min_cut, end)
    if sentence is not None:
        return sentence
    for sep in ("\n", " ", "\t"):
        pos = text.rfind(sep, min_cut, end)
        if pos != -1:
            return pos + 1
    return end


def _next_word_start(text: str, pos: int, limit: int) -> int:
    while pos < limit and (text[pos].isspace() or (pos > 0 and not text[pos - 1].isspace())):
        pos += 1
    return pos


def chunk_text(
    text: str,
    target_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> Iterator[TextChunk]:
    """Yield overlapping chunks of at most ``target_size`` characters.

    Each cut falls on the last paragraph break of the window, else the last
    sentence end, else a line break or a space; a hard cut happens only when
    the window has no boundary past the overlap zone. The next chunk starts
    ``overlap`` characters before the cut, moved forward to a word start.

    Raises:
        ValueError: If target_size <= 0, overlap < 0 or overlap >= target_size.
    """
    if target_size <= 0:
        msg = f"target_size must be positive, got {target_size}"
        raise ValueError(msg)
    if overlap < 0 or overlap >= target_size:
        msg = f"overlap must be in [0, {target_size}), got {overlap}"
        raise ValueError(msg)

    length = len(text)
    start = 0
    previous: TextChunk | None = None
    index = 0
    while start < length:
        end = min(start + target_size, length)
        if end < length:
            end = _find_cut(text, end, min_cut=start + overlap + 1)

        chunk = TextChunk(
            index=index,
            text=text[start:end],
            start_offset=start,
            overlap_with_previous=max(0, previous.end_offset - start) if previous else 0,
        )
        yield chunk
        if end >= length:
            return

        previous = chunk
        start = _next_word_start(text, end - overlap, end) if overlap else end
        index += 1
