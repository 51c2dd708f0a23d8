"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from cv_formatter_core.models.cv_draft import CvDraft
from cv_formatter_core.state import PipelineState
from tests.mocks.mock_factories import make_cv_draft, make_cv_payload, make_pipeline_state
from tests.mocks.mock_settings import make_settings


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def pipeline_state() -> PipelineState:
    """Return a fresh PipelineState for a small PDF request."""
    return make_pipeline_state()


@pytest.fixture
def sample_payload() -> dict[str, object]:
    """Return a schema-valid camelCase draft payload."""
    return make_cv_payload()


@pytest.fixture
def sample_draft() -> CvDraft:
    """Return a validated CvDraft."""
    return make_cv_draft()
