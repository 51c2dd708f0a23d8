"""EHS file naming: 'FirstName (BH No) Client CV'."""

from __future__ import annotations

import re

from cv_formatter_core.constants import (
    DEFAULT_CANDIDATE_ID,
    DEFAULT_CLIENT_LABEL,
    DEFAULT_FIRST_NAME,
)
from cv_formatter_core.models.cv_draft import CvDraft

_UNSAFE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def _clean(value: str | None, default: str) -> str:
    cleaned = " ".join(_UNSAFE.sub("", value or "").split())
    return cleaned or default


def derive_filename(
    draft: CvDraft,
    candidate_id: str | None = None,
    client_label: str | None = None,
) -> str:
    """Build the EHS export file name (without extension)."""
    parts = draft.header.name.split()
    first_name = _clean(parts[0] if parts else None, DEFAULT_FIRST_NAME)
    cid = _clean(candidate_id, DEFAULT_CANDIDATE_ID)
    client = _clean(client_label, DEFAULT_CLIENT_LABEL)
    return f"{first_name} ({cid}) {client} CV"
