"""Shared mock Settings factory and real Settings factory for integration tests."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock

if TYPE_CHECKING:
    from cv_formatter_core.config.settings import Settings


def make_settings(**overrides: object) -> MagicMock:
    """Create a mock Settings with sensible defaults.

    All agents and pipeline code rely on these fields. Override any
    attribute via keyword arguments. No API keys are set, so tests must
    hand providers to the Pipeline explicitly.
    """
    settings = MagicMock()
    settings.openai_api_key = None
    settings.anthropic_api_key = None
    settings.google_api_key = None
    settings.openai_model = "gpt-4o-mini"
    settings.anthropic_model = "claude-3-haiku-20240307"
    settings.gemini_model = "gemini-1.5-flash"
    settings.gemini_base_url = "https://generativelanguage.googleapis.com/v1beta/openai/"
    settings.provider_order = ["openai", "anthropic", "gemini"]
    settings.oracle_temperature = 0.0
    settings.oracle_max_tokens = 4000
    settings.oracle_timeout_seconds = 5.0
    settings.oracle_max_retries = 0
    settings.max_concurrent_oracle_calls = 3
    settings.chunking_threshold_chars = 48_000
    settings.chunk_size_chars = 8_000
    settings.chunk_overlap_chars = 1_000
    settings.min_pdf_text_chars = 50
    settings.ocr_enabled = True
    settings.ocr_language = "eng"
    settings.max_document_size_mb = 10
    settings.bullet_split_threshold_chars = 100
    settings.compliance_penalty_per_issue = 10
    settings.default_candidate_id = "BH001"
    settings.default_client_label = "Client"
    settings.agent_timeout_seconds = 300
    settings.max_cost_per_document_usd = 1.0
    settings.warn_cost_threshold_usd = 0.5
    settings.log_level = "INFO"
    settings.log_format = "console"
    settings.otel_exporter = "none"
    settings.otel_endpoint = "http://localhost:4317"
    settings.otel_service_name = "ehs-cv-formatter-test"

    for key, value in overrides.items():
        setattr(settings, key, value)

    return settings


def make_real_settings(**overrides: object) -> Settings:
    """Create a real Settings instance that ignores the environment's .env file."""
    from cv_formatter_core.config.settings import Settings as _Settings

    return _Settings(_env_file=None, **overrides)  # type: ignore[arg-type, call-arg]
