"""Processing request, per-chunk results and run summary models."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from cv_formatter_core.models.compliance import ComplianceReport
from cv_formatter_core.models.cv_draft import CvDraft
from cv_formatter_core.models.document import ExtractedText, RawDocument, TextChunk


class ProcessingRequest(BaseModel):
    """Everything the pipeline needs to process one upload."""

    document_id: str = Field(
        default_factory=lambda: f"doc_{uuid4().hex[:12]}",
        description="Identifier bound to every log line of this run",
    )
    document: RawDocument = Field(description="The uploaded document")
    candidate_id: str | None = Field(default=None, description="Candidate number for file naming")
    client_label: str | None = Field(default=None, description="Client label for file naming")


class AgentError(BaseModel):
    """Record of a non-fatal error raised during a pipeline step."""

    agent_name: str = Field(description="Name of the agent that errored")
    error_type: str = Field(description="Exception class name")
    error_message: str = Field(description="Error description")
    chunk_index: int | None = Field(default=None, description="Related chunk if applicable")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the error occurred"
    )
    is_fatal: bool = Field(default=False, description="Whether this error stopped the run")


class ChunkResult(BaseModel):
    """A chunk together with the validated draft structured from it."""

    chunk: TextChunk
    draft: CvDraft
    provider: str = Field(description="Provider that produced the accepted candidate")


class ProcessingResult(BaseModel):
    """Outcome of a successful run."""

    document_id: str
    draft: CvDraft
    compliance: ComplianceReport
    filename: str = Field(description="EHS file name derived from the draft")
    extraction: ExtractedText
    chunk_count: int = Field(ge=1)
    failed_chunks: list[int] = Field(default_factory=list)
    providers_used: list[str] = Field(default_factory=list)
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0
    duration_seconds: float = 0.0
    completed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
