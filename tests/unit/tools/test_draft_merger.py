"""Tests for per-chunk draft reconciliation."""

from __future__ import annotations

import itertools

import pytest

from cv_formatter_agents.tools.merger import (
    education_key,
    experience_key,
    merge_chunk_results,
    merge_drafts,
)
from cv_formatter_core.exceptions import NoViableChunksError
from cv_formatter_core.models.cv_draft import ExperienceItem
from tests.mocks.mock_factories import make_chunk_result, make_cv_draft, make_experience


def _job(role: str, company: str, start: str, bullet: str = "Did things.") -> dict[str, object]:
    return make_experience(role=role, company=company, startDate=start, bullets=[bullet])


@pytest.mark.unit
class TestKeys:
    """Test entry identity keys."""

    def test_experience_key_normalizes(self) -> None:
        """Case, whitespace and date format do not change identity."""
        a = ExperienceItem.model_validate(_job("Lead Developer", "Acme Corp", "2019-06"))
        b = ExperienceItem.model_validate(_job("lead  developer", "ACME corp", "Jun 2019"))
        assert experience_key(a) == experience_key(b)

    def test_education_key(self) -> None:
        """Education identity is institution, degree and start date."""
        draft = make_cv_draft()
        assert education_key(draft.education[0]) == (
            "university of leeds",
            "bsc computer science",
            "sep 2010",
        )


@pytest.mark.unit
class TestMergeDrafts:
    """Test merge_drafts reconciliation."""

    def test_empty_raises(self) -> None:
        """No drafts means no viable chunk."""
        with pytest.raises(NoViableChunksError):
            merge_drafts([])

    def test_single_draft_returned(self) -> None:
        """One draft is returned untouched."""
        draft = make_cv_draft()
        assert merge_drafts([draft]) is draft

    def test_scalars_from_first_draft(self) -> None:
        """Header and profile come from the earliest chunk."""
        first = make_cv_draft(profile="First profile.")
        second = make_cv_draft(
            header={"name": "Someone Else", "title": "Other"}, profile="Second profile."
        )
        merged = merge_drafts([first, second])
        assert merged.header.name == "Jane Doe"
        assert merged.profile == "First profile."

    def test_overlap_duplicates_removed(self) -> None:
        """An entry seen in two overlapping chunks appears once, first version kept."""
        first = make_cv_draft(experience=[_job("Lead Developer", "Acme", "Jun 2019", "First.")])
        second = make_cv_draft(
            experience=[
                _job("lead developer", "ACME", "2019-06", "Second."),
                _job("Engineer", "Globex", "Jan 2015"),
            ]
        )
        merged = merge_drafts([first, second])
        assert [e.company for e in merged.experience] == ["Acme", "Globex"]
        assert merged.experience[0].bullets == ["First."]

    def test_sorted_newest_first(self) -> None:
        """Entries are ordered by start date descending, unparseable last."""
        first = make_cv_draft(experience=[_job("A", "Old Co", "Jan 2010"), _job("B", "?", "soon")])
        second = make_cv_draft(experience=[_job("C", "New Co", "Mar 2021")])
        merged = merge_drafts([first, second])
        assert [e.company for e in merged.experience] == ["New Co", "Old Co", "?"]

    def test_lists_unioned(self) -> None:
        """Skills, interests and languages are unioned case-insensitively."""
        first = make_cv_draft(
            skills=["Python", "SQL"],
            interests=["Cycling"],
            personalDetails={"languages": ["English"]},
        )
        second = make_cv_draft(
            skills=["python", "Docker"],
            interests=["Chess"],
            personalDetails={"languages": ["english", "German"]},
        )
        merged = merge_drafts([first, second])
        assert merged.skills == ["Python", "SQL", "Docker"]
        assert merged.interests == ["Cycling", "Chess"]
        assert merged.personal_details.languages == ["English", "German"]

    def test_audit_unioned(self) -> None:
        """Audit lists are unioned in chunk order."""
        first = make_cv_draft(audit={"rulesApplied": ["a", "b"], "issues": ["x"]})
        second = make_cv_draft(audit={"rulesApplied": ["b", "c"], "issues": ["y"]})
        merged = merge_drafts([first, second])
        assert merged.audit.rules_applied == ["a", "b", "c"]
        assert merged.audit.issues == ["x", "y"]


@pytest.mark.unit
class TestMergeChunkResults:
    """Test order independence."""

    def test_completion_order_irrelevant(self) -> None:
        """Any permutation of chunk results merges to the same draft."""
        results = [
            make_chunk_result(
                start_offset=offset,
                index=i,
                profile=f"Profile {i}.",
                experience=[_job(f"Role {i}", f"Company {i}", f"Jan 20{10 + i}")],
                skills=[f"Skill {i}"],
            )
            for i, offset in enumerate((0, 7000, 14000))
        ]
        expected = merge_chunk_results(results).to_payload()
        for perm in itertools.permutations(results):
            assert merge_chunk_results(perm).to_payload() == expected

        assert expected["profile"] == "Profile 0."
        assert expected["skills"] == ["Skill 0", "Skill 1", "Skill 2"]
