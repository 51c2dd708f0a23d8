"""Reconciliation of per-chunk drafts into one CV draft."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

import structlog
from pydantic import BaseModel

from cv_formatter_agents.rules.dates import date_sort_key, normalize_date
from cv_formatter_agents.rules.engine import union_in_order
from cv_formatter_core.exceptions import NoViableChunksError
from cv_formatter_core.models.cv_draft import CvDraft, EducationItem, ExperienceItem
from cv_formatter_core.models.run import ChunkResult
from cv_formatter_core.validation import validate_cv_draft

logger = structlog.get_logger()

ItemT = TypeVar("ItemT", ExperienceItem, EducationItem)


def _norm(value: str) -> str:
    return " ".join(value.casefold().split())


def _norm_date(value: str) -> str:
    normalized, _ = normalize_date(value)
    return _norm(normalized)


def experience_key(item: ExperienceItem) -> tuple[str, str, str]:
    """Identity of a job: company + role + start date.

    Two distinct positions at the same company with the same title and
    start date collapse into one.
    """
    return (_norm(item.company), _norm(item.role), _norm_date(item.start_date))


def education_key(item: EducationItem) -> tuple[str, str, str]:
    """Identity of an education entry: institution + degree + start date."""
    return (_norm(item.institution), _norm(item.degree), _norm_date(item.start_date))


def _dedupe(items: Iterable[ItemT], key: Callable[[ItemT], tuple[str, ...]]) -> list[ItemT]:
    seen: set[tuple[str, ...]] = set()
    unique: list[ItemT] = []
    for item in items:
        k = key(item)
        if k not in seen:
            seen.add(k)
            unique.append(item)
    return unique


def _start_key(item: ExperienceItem | EducationItem) -> tuple[int, int, int]:
    parsed = date_sort_key(item.start_date)
    if parsed is None:
        return (1, 0, 0)
    year, month = parsed
    return (0, -year, -month)


def _union_casefold(groups: Iterable[Iterable[str]]) -> list[str]:
    """Union preserving first-seen order and casing."""
    seen: set[str] = set()
    out: list[str] = []
    for group in groups:
        for item in group:
            k = _norm(item)
            if k and k not in seen:
                seen.add(k)
                out.append(item)
    return out


def _dump(items: Iterable[BaseModel]) -> list[dict[str, object]]:
    return [i.model_dump(mode="json", by_alias=True, exclude_none=True) for i in items]


def merge_drafts(drafts: Sequence[CvDraft]) -> CvDraft:
    """Merge drafts given in document order into one validated draft.

    Scalars (header, profile, personal details, typography) come from the
    earliest draft. Experience and education are deduplicated (first
    occurrence wins) and sorted newest first, unparseable start dates last.
    Skills, interests and languages are unioned case-insensitively. Audit
    lists are unioned in order.

    Raises:
        NoViableChunksError: If drafts is empty.
    """
    if not drafts:
        msg = "No chunk produced a valid draft"
        raise NoViableChunksError(msg)
    if len(drafts) == 1:
        return drafts[0]

    experience = _dedupe((e for d in drafts for e in d.experience), experience_key)
    education = _dedupe((e for d in drafts for e in d.education), education_key)

    merged = drafts[0].to_payload()
    merged["experience"] = _dump(sorted(experience, key=_start_key))
    merged["education"] = _dump(sorted(education, key=_start_key))
    merged["skills"] = _union_casefold(d.skills for d in drafts)
    merged["interests"] = _union_casefold(d.interests for d in drafts)

    personal = drafts[0].personal_details.model_dump(mode="json", by_alias=True, exclude_none=True)
    personal["languages"] = _union_casefold(d.personal_details.languages for d in drafts)
    merged["personalDetails"] = personal

    merged["audit"] = {
        "rulesApplied": union_in_order(*(d.audit.rules_applied for d in drafts)),
        "issues": union_in_order(*(d.audit.issues for d in drafts)),
    }

    logger.info(
        "drafts_merged",
        draft_count=len(drafts),
        experience_count=len(experience),
        education_count=len(education),
    )
    return validate_cv_draft(merged)


def merge_chunk_results(results: Iterable[ChunkResult]) -> CvDraft:
    """Merge chunk results regardless of the order they completed in."""
    ordered = sorted(results, key=lambda r: r.chunk.start_offset)
    return merge_drafts([r.draft for r in ordered])
