"""EHS compliance report for a CV draft."""

from __future__ import annotations

import structlog

from cv_formatter_agents.rules.dates import is_ehs_date
from cv_formatter_agents.rules.pii import find_pii_paths
from cv_formatter_agents.rules.text import capitalize_title
from cv_formatter_core.constants import DEFAULT_COMPLIANCE_PENALTY, EHS_TYPOGRAPHY
from cv_formatter_core.models.compliance import ComplianceReport
from cv_formatter_core.models.cv_draft import CvDraft

logger = structlog.get_logger()


def _typography_issues(draft: CvDraft) -> list[str]:
    typo = draft.typography
    if typo is None:
        return [f"Font should be {EHS_TYPOGRAPHY['font']}"]
    issues = []
    if typo.font != EHS_TYPOGRAPHY["font"]:
        issues.append(f"Font should be {EHS_TYPOGRAPHY['font']}")
    if typo.photo_size != EHS_TYPOGRAPHY["photoSize"]:
        issues.append(f"Photo size should be {EHS_TYPOGRAPHY['photoSize']}")
    if typo.date_format != EHS_TYPOGRAPHY["dateFormat"]:
        issues.append(f"Date format setting should be '{EHS_TYPOGRAPHY['dateFormat']}'")
    return issues


def _date_issues(draft: CvDraft) -> list[str]:
    issues = []
    sections = {"experience": draft.experience, "education": draft.education}
    for section, entries in sections.items():
        for i, entry in enumerate(entries):
            issues.extend(_entry_date_issues(section, i, entry.start_date, entry.end_date))
    return issues


def _entry_date_issues(section: str, i: int, start: str, end: str) -> list[str]:
    issues = []
    if not is_ehs_date(start):
        issues.append(f"Date format should be 'Jan 2020' not '{start}' ({section}[{i}].startDate)")
    if not is_ehs_date(end, allow_present=True):
        issues.append(f"Date format should be 'Jan 2020' not '{end}' ({section}[{i}].endDate)")
    return issues


def _title_issues(draft: CvDraft) -> list[str]:
    issues = []
    titles = [draft.header.title] + [e.role for e in draft.experience]
    for title in titles:
        if title != capitalize_title(title):
            issues.append(f"Job title should be properly capitalized: '{title}'")
    return issues


def check_compliance(
    draft: CvDraft,
    penalty_per_issue: int = DEFAULT_COMPLIANCE_PENALTY,
) -> ComplianceReport:
    """Score a draft against the EHS standard.

    Each issue costs ``penalty_per_issue`` points from 100, floored at 0.
    A draft is compliant only when no issue is found.
    """
    issues = [
        *_typography_issues(draft),
        *_date_issues(draft),
        *_title_issues(draft),
        *(f"Remove inappropriate field: {p}" for p in find_pii_paths(draft.to_payload())),
    ]
    score = max(0, 100 - penalty_per_issue * len(issues))
    logger.debug("compliance_checked", issue_count=len(issues), score=score)
    return ComplianceReport(compliant=not issues, issues=issues, score=score)
