"""Tests for EHS file naming."""

from __future__ import annotations

import pytest

from cv_formatter_agents.rules.filename import derive_filename
from tests.mocks.mock_factories import make_cv_draft


@pytest.mark.unit
class TestDeriveFilename:
    """Test 'FirstName (BH No) Client CV' naming."""

    def test_defaults(self) -> None:
        """Missing candidate id and client fall back to defaults."""
        assert derive_filename(make_cv_draft()) == "Jane (BH001) Client CV"

    def test_explicit_values(self) -> None:
        """Given values are used as-is."""
        name = derive_filename(make_cv_draft(), candidate_id="BH123", client_label="Acme")
        assert name == "Jane (BH123) Acme CV"

    def test_unsafe_characters_removed(self) -> None:
        """Characters invalid in file names are dropped."""
        draft = make_cv_draft(header={"name": "Jo/hn Smith", "title": "Dev"})
        name = derive_filename(draft, candidate_id="BH:9", client_label='Big "Co" Ltd')
        assert name == "John (BH9) Big Co Ltd CV"

    def test_blank_after_cleaning_uses_default(self) -> None:
        """A value made only of unsafe characters falls back."""
        name = derive_filename(make_cv_draft(), candidate_id="???", client_label="   ")
        assert name == "Jane (BH001) Client CV"
