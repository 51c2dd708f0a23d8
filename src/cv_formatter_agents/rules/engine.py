"""EHS rule engine: deterministic, idempotent normalization of a CV draft."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import structlog

from cv_formatter_agents.rules import text as text_rules
from cv_formatter_agents.rules.compliance import check_compliance
from cv_formatter_agents.rules.dates import normalize_date
from cv_formatter_agents.rules.pii import strip_pii
from cv_formatter_core.constants import (
    DEFAULT_BULLET_SPLIT_THRESHOLD,
    DEFAULT_COMPLIANCE_PENALTY,
    EHS_TYPOGRAPHY,
    RULE_BULLET_CONVERSION,
    RULE_COMMON_MISTAKES,
    RULE_DATE_NORMALIZATION,
    RULE_ENTITY_CAPITALIZATION,
    RULE_PII_REMOVAL,
    RULE_REDUNDANT_PHRASES,
    RULE_TITLE_CAPITALIZATION,
    RULE_TYPOGRAPHY,
)
from cv_formatter_core.models.compliance import ComplianceReport
from cv_formatter_core.models.cv_draft import CvDraft
from cv_formatter_core.validation import validate_cv_draft

logger = structlog.get_logger()

Payload = dict[str, object]


def union_in_order(*groups: Iterable[str]) -> list[str]:
    """Concatenate string lists, dropping repeats, first occurrence wins."""
    seen: set[str] = set()
    out: list[str] = []
    for group in groups:
        for item in group:
            if item not in seen:
                seen.add(item)
                out.append(item)
    return out


@dataclass
class _RuleRun:
    """Rules fired and issues raised during one normalize() call."""

    applied: list[str] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)

    def fired(self, rule: str) -> None:
        if rule not in self.applied:
            self.applied.append(rule)

    def issue(self, message: str) -> None:
        if message not in self.issues:
            self.issues.append(message)


def _has_text(value: str) -> bool:
    """True when cleanup left at least one letter or digit."""
    return any(ch.isalnum() for ch in value)


def _entries(payload: Payload, section: str) -> list[Payload]:
    value = payload.get(section)
    if not isinstance(value, list):
        return []
    return [e for e in value if isinstance(e, dict)]


class EHSRuleEngine:
    """Apply the EHS formatting standard to validated CV drafts.

    ``normalize`` never mutates its input and always returns a draft that
    passes the schema validator again; running it twice gives the same
    result as running it once.
    """

    def __init__(
        self,
        bullet_split_threshold: int = DEFAULT_BULLET_SPLIT_THRESHOLD,
        compliance_penalty: int = DEFAULT_COMPLIANCE_PENALTY,
    ) -> None:
        self.bullet_split_threshold = bullet_split_threshold
        self.compliance_penalty = compliance_penalty

    def normalize(self, draft: CvDraft) -> CvDraft:
        """Return the EHS-normalized copy of a draft."""
        run = _RuleRun()
        payload, removed = strip_pii(draft.to_payload())
        if removed:
            run.fired(RULE_PII_REMOVAL)
            for path in removed:
                run.issue(f"Removed inappropriate field: {path}")

        self._clean_text(payload, run)
        self._convert_bullets(payload, run)
        self._normalize_dates(payload, run)
        self._capitalize_titles(payload, run)
        self._capitalize_entities(payload, run)

        if payload.get("typography") != EHS_TYPOGRAPHY:
            payload["typography"] = dict(EHS_TYPOGRAPHY)
            run.fired(RULE_TYPOGRAPHY)

        audit = dict(payload.get("audit") or {})  # type: ignore[call-overload]
        audit["rulesApplied"] = union_in_order(audit.get("rulesApplied", []), run.applied)
        audit["issues"] = union_in_order(audit.get("issues", []), run.issues)
        payload["audit"] = audit

        normalized = validate_cv_draft(payload)
        logger.debug(
            "draft_normalized",
            rules_fired=run.applied,
            issue_count=len(run.issues),
        )
        return normalized

    def check_compliance(self, draft: CvDraft) -> ComplianceReport:
        """Score a draft against the EHS standard."""
        return check_compliance(draft, penalty_per_issue=self.compliance_penalty)

    # --- Rule groups ---

    def _clean_text(self, payload: Payload, run: _RuleRun) -> None:
        """Redundant phrases and common mistakes over free-text fields."""
        self._map_free_text(payload, run, RULE_REDUNDANT_PHRASES, text_rules.remove_redundant_phrases)
        self._map_free_text(payload, run, RULE_COMMON_MISTAKES, text_rules.correct_common_mistakes)

        targets = [(entry, "role") for entry in _entries(payload, "experience")]
        header = payload.get("header")
        if isinstance(header, dict):
            targets.insert(0, (header, "title"))
        self._rewrite(targets, text_rules.correct_common_mistakes, RULE_COMMON_MISTAKES, run)

    def _map_free_text(
        self,
        payload: Payload,
        run: _RuleRun,
        rule: str,
        fn: Callable[[str], str],
    ) -> None:
        profile = payload.get("profile")
        if isinstance(profile, str):
            cleaned = fn(profile)
            if cleaned != profile and not _has_text(cleaned):
                run.issue(f"Cleanup would empty 'profile'; original text kept ({rule})")
            elif cleaned != profile:
                payload["profile"] = cleaned
                run.fired(rule)

        for i, entry in enumerate(_entries(payload, "experience")):
            self._map_list(entry, "bullets", f"experience[{i}].bullets", fn, rule, run)
        for i, entry in enumerate(_entries(payload, "education")):
            self._map_list(entry, "details", f"education[{i}].details", fn, rule, run)
        self._map_list(payload, "skills", "skills", fn, rule, run)
        self._map_list(payload, "interests", "interests", fn, rule, run)

    def _map_list(
        self,
        container: Payload,
        key: str,
        label: str,
        fn: Callable[[str], str],
        rule: str,
        run: _RuleRun,
    ) -> None:
        items = container.get(key)
        if not isinstance(items, list):
            return
        mapped = [fn(item) if isinstance(item, str) else item for item in items]
        kept = [
            new
            for new, old in zip(mapped, items, strict=True)
            if not isinstance(new, str) or _has_text(new) or (new == old and new.strip())
        ]
        if items and not kept:
            run.issue(f"Cleanup would empty '{label}'; original values kept ({rule})")
            return
        if kept != items:
            container[key] = kept
            run.fired(rule)

    def _convert_bullets(self, payload: Payload, run: _RuleRun) -> None:
        threshold = self.bullet_split_threshold

        def _split(container: Payload, key: str) -> None:
            items = container.get(key)
            if not isinstance(items, list):
                return
            split: list[object] = []
            for item in items:
                if isinstance(item, str):
                    split.extend(text_rules.split_into_bullets(item, threshold))
                else:
                    split.append(item)
            if split != items:
                container[key] = split
                run.fired(RULE_BULLET_CONVERSION)

        for entry in _entries(payload, "experience"):
            _split(entry, "bullets")
        for entry in _entries(payload, "education"):
            _split(entry, "details")

    def _normalize_dates(self, payload: Payload, run: _RuleRun) -> None:
        for section in ("experience", "education"):
            for i, entry in enumerate(_entries(payload, section)):
                for key in ("startDate", "endDate"):
                    value = entry.get(key)
                    if not isinstance(value, str):
                        continue
                    normalized, recognized = normalize_date(value)
                    if not recognized:
                        run.issue(f"Unrecognized date format in {section}[{i}].{key}: '{value}'")
                    elif normalized != value:
                        entry[key] = normalized
                        run.fired(RULE_DATE_NORMALIZATION)

    def _capitalize_titles(self, payload: Payload, run: _RuleRun) -> None:
        targets: list[tuple[Payload, str]] = []
        header = payload.get("header")
        if isinstance(header, dict):
            targets += [(header, "name"), (header, "title")]
        targets += [(entry, "role") for entry in _entries(payload, "experience")]
        self._rewrite(targets, text_rules.capitalize_title, RULE_TITLE_CAPITALIZATION, run)

    def _capitalize_entities(self, payload: Payload, run: _RuleRun) -> None:
        rule = RULE_ENTITY_CAPITALIZATION
        experience = _entries(payload, "experience")
        education = _entries(payload, "education")
        self._rewrite([(e, "company") for e in experience], text_rules.capitalize_company, rule, run)
        self._rewrite([(e, "institution") for e in education], text_rules.capitalize_institution, rule, run)
        self._rewrite([(e, "degree") for e in education], text_rules.capitalize_degree, rule, run)

        for key, fn in (
            ("skills", text_rules.capitalize_skill),
            ("interests", text_rules.capitalize_first),
        ):
            items = payload.get(key)
            if not isinstance(items, list):
                continue
            # Merged chunks can repeat a skill in different casings
            rewritten = _dedupe_casefold([fn(i) if isinstance(i, str) else i for i in items])
            if rewritten != items:
                payload[key] = rewritten
                run.fired(rule)

    @staticmethod
    def _rewrite(
        targets: list[tuple[Payload, str]],
        fn: Callable[[str], str],
        rule: str,
        run: _RuleRun,
    ) -> None:
        for container, key in targets:
            value = container.get(key)
            if not isinstance(value, str):
                continue
            rewritten = fn(value)
            if rewritten != value:
                container[key] = rewritten
                run.fired(rule)


def _dedupe_casefold(items: list[object]) -> list[object]:
    seen: set[str] = set()
    out: list[object] = []
    for item in items:
        if isinstance(item, str):
            key = item.casefold()
            if key in seen:
                continue
            seen.add(key)
        out.append(item)
    return out
