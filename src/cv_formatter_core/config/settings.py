"""Application settings using pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cv_formatter_core.constants import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CHUNKING_THRESHOLD,
)

ProviderName = Literal["openai", "anthropic", "gemini"]


class Settings(BaseSettings):
    """Central configuration for ehs-cv-formatter."""

    model_config = SettingsConfigDict(env_prefix="EHS_", env_file=".env")

    # --- LLM providers ---
    openai_api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key",
    )
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        description="Anthropic API key for Claude models",
    )
    google_api_key: SecretStr | None = Field(
        default=None,
        description="Google AI Studio key for Gemini models",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Model ID for the OpenAI provider",
    )
    anthropic_model: str = Field(
        default="claude-3-haiku-20240307",
        description="Model ID for the Anthropic provider",
    )
    gemini_model: str = Field(
        default="gemini-1.5-flash",
        description="Model ID for the Gemini provider",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        description="OpenAI-compatible endpoint for Gemini",
    )
    provider_order: list[ProviderName] = Field(
        default_factory=lambda: ["openai", "anthropic", "gemini"],
        description="Providers tried in order for every text unit",
    )

    # --- Oracle calls ---
    oracle_temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Sampling temperature; keep at 0 for reproducible drafts",
    )
    oracle_max_tokens: int = Field(
        default=4000,
        description="Maximum output tokens per oracle call",
    )
    oracle_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout per oracle call in seconds",
    )
    oracle_max_retries: int = Field(
        default=2,
        description="Retries per provider for transient errors",
    )
    max_concurrent_oracle_calls: int = Field(
        default=3,
        description="Maximum chunks structured concurrently",
    )

    # --- Chunking ---
    chunking_threshold_chars: int = Field(
        default=DEFAULT_CHUNKING_THRESHOLD,
        description="Texts longer than this are structured chunk by chunk",
    )
    chunk_size_chars: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        description="Target size of each chunk in characters",
    )
    chunk_overlap_chars: int = Field(
        default=DEFAULT_CHUNK_OVERLAP,
        description="Characters shared by adjacent chunks",
    )

    # --- Extraction ---
    min_pdf_text_chars: int = Field(
        default=50,
        description="Below this, a PDF text layer is considered missing",
    )
    ocr_enabled: bool = Field(
        default=True,
        description="Run OCR on PDFs without a usable text layer",
    )
    ocr_language: str = Field(
        default="eng",
        description="Tesseract language code",
    )
    max_document_size_mb: int = Field(
        default=10,
        description="Warn when an upload is larger than this",
    )

    # --- EHS rules ---
    bullet_split_threshold_chars: int = Field(
        default=100,
        description="Text blocks longer than this are split into sentence bullets",
    )
    compliance_penalty_per_issue: int = Field(
        default=10,
        description="Points subtracted from the compliance score per issue",
    )
    default_candidate_id: str = Field(
        default="BH001",
        description="Candidate number used in file names when none is given",
    )
    default_client_label: str = Field(
        default="Client",
        description="Client label used in file names when none is given",
    )

    # --- Run ---
    agent_timeout_seconds: int = Field(
        default=300,
        description="Time budget for each pipeline step",
    )

    # --- Cost Guardrails ---
    max_cost_per_document_usd: float = Field(
        default=1.0,
        description="Hard stop if estimated cost for one document exceeds this (USD)",
    )
    warn_cost_threshold_usd: float = Field(
        default=0.5,
        description="Log warning at this cost threshold (USD)",
    )

    # --- Observability ---
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )
    otel_exporter: Literal["none", "console", "otlp"] = Field(
        default="none",
        description="OpenTelemetry span exporter",
    )
    otel_endpoint: str = Field(
        default="http://localhost:4317",
        description="OTLP collector endpoint",
    )
    otel_service_name: str = Field(
        default="ehs-cv-formatter",
        description="Service name attached to spans",
    )

    @model_validator(mode="after")
    def validate_chunking(self) -> Settings:
        """Ensure chunk overlap leaves room for progress."""
        if self.chunk_size_chars <= 0:
            msg = "chunk_size_chars must be positive"
            raise ValueError(msg)
        if not 0 <= self.chunk_overlap_chars < self.chunk_size_chars:
            msg = (
                f"chunk_overlap_chars ({self.chunk_overlap_chars}) must be in "
                f"[0, chunk_size_chars={self.chunk_size_chars})"
            )
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_provider_order(self) -> Settings:
        """Reject an empty or repetitive provider list."""
        if not self.provider_order:
            msg = "provider_order must name at least one provider"
            raise ValueError(msg)
        if len(set(self.provider_order)) != len(self.provider_order):
            msg = f"provider_order contains duplicates: {self.provider_order}"
            raise ValueError(msg)
        return self
