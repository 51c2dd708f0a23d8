"""Date normalization to the EHS short format ('Jan 2020')."""

from __future__ import annotations

import re

from cv_formatter_core.constants import (
    END_DATE_MARKERS,
    MONTH_ABBREVIATIONS,
    MONTH_TOKENS,
    PRESENT_LABEL,
)

EHS_DATE_RE = re.compile(r"^[A-Z][a-z]{2}\s\d{4}$")

_YEAR_FIRST_NUMERIC = re.compile(r"^(\d{4})[-/.](\d{1,2})(?:[-/.]\d{1,2})?$")
_MONTH_FIRST_NUMERIC = re.compile(r"^(\d{1,2})[-/.](\d{4})$")
_MONTH_NAME_YEAR = re.compile(r"^([A-Za-z]+)\.?,?\s+(\d{4})$")
_YEAR_MONTH_NAME = re.compile(r"^(\d{4})\s+([A-Za-z]+)\.?$")
_WORD = re.compile(r"[A-Za-z]+")
_YEAR = re.compile(r"\b(\d{4})\b")


def _format(month: int, year: str) -> str | None:
    if not 1 <= month <= 12:
        return None
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def _month_from_token(token: str) -> int | None:
    return MONTH_TOKENS.get(token.lower())


def _parse(value: str) -> str | None:
    """Return the 'Mon YYYY' rendering of value, or None if unrecognized."""
    if m := _YEAR_FIRST_NUMERIC.match(value):
        return _format(int(m.group(2)), m.group(1))
    if m := _MONTH_FIRST_NUMERIC.match(value):
        return _format(int(m.group(1)), m.group(2))
    if m := _MONTH_NAME_YEAR.match(value):
        month = _month_from_token(m.group(1))
        return _format(month, m.group(2)) if month else None
    if m := _YEAR_MONTH_NAME.match(value):
        month = _month_from_token(m.group(2))
        return _format(month, m.group(1)) if month else None

    # Free text: first month word plus first 4-digit year
    year = _YEAR.search(value)
    if year is None:
        return None
    for word in _WORD.findall(value):
        month = _month_from_token(word)
        if month:
            return _format(month, year.group(1))
    return None


def is_end_marker(value: str) -> bool:
    """True for 'present', 'current' and the other open-ended end dates."""
    return " ".join(value.lower().split()) in END_DATE_MARKERS


def normalize_date(value: str) -> tuple[str, bool]:
    """Normalize a date string to 'Mon YYYY'.

    Returns the (possibly unchanged) value and whether it was recognized.
    Open-ended markers become 'Present'. Unrecognized values pass through.
    """
    stripped = value.strip()
    if is_end_marker(stripped):
        return PRESENT_LABEL, True
    parsed = _parse(stripped)
    if parsed is None:
        return value, False
    return parsed, True


def is_ehs_date(value: str, *, allow_present: bool = False) -> bool:
    """Check a value against the EHS 'Mon YYYY' format."""
    if allow_present and value == PRESENT_LABEL:
        return True
    return bool(EHS_DATE_RE.match(value))


def date_sort_key(value: str) -> tuple[int, int] | None:
    """(year, month) of a date for chronological ordering, None if unparseable."""
    normalized, recognized = normalize_date(value)
    if not recognized:
        return None
    if normalized == PRESENT_LABEL:
        return (9999, 12)
    month_token, year = normalized.split()
    return (int(year), MONTH_ABBREVIATIONS.index(month_token) + 1)
