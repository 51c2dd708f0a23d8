"""Pipeline state: mutable state owned by a single document run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from cv_formatter_core.models.compliance import ComplianceReport
from cv_formatter_core.models.cv_draft import CvDraft
from cv_formatter_core.models.document import ExtractedText, TextChunk
from cv_formatter_core.models.run import (
    AgentError,
    ChunkResult,
    ProcessingRequest,
    ProcessingResult,
)


@dataclass
class PipelineState:
    """Mutable state passed through the pipeline steps of one document."""

    request: ProcessingRequest

    # Step outputs
    extracted: ExtractedText | None = None
    chunks: list[TextChunk] = field(default_factory=list)
    chunk_results: list[ChunkResult] = field(default_factory=list)
    draft: CvDraft | None = None
    compliance: ComplianceReport | None = None
    filename: str | None = None

    # Step names in the order they finished
    completed_steps: list[str] = field(default_factory=list)

    # Cross-cutting
    errors: list[AgentError] = field(default_factory=list)
    total_tokens: int = 0
    total_cost_usd: float = 0.0

    @property
    def document_id(self) -> str:
        """Identifier of the document being processed."""
        return self.request.document_id

    @property
    def failed_chunks(self) -> list[int]:
        """Indexes of chunks that no provider could structure."""
        succeeded = {r.chunk.index for r in self.chunk_results}
        return [c.index for c in self.chunks if c.index not in succeeded]

    def build_result(self, duration_seconds: float) -> ProcessingResult:
        """Build a ProcessingResult from a completed state."""
        if self.draft is None or self.compliance is None or self.extracted is None:
            msg = "Cannot build a result before the pipeline has completed"
            raise ValueError(msg)

        providers: list[str] = []
        for r in self.chunk_results:
            if r.provider not in providers:
                providers.append(r.provider)

        return ProcessingResult(
            document_id=self.document_id,
            draft=self.draft,
            compliance=self.compliance,
            filename=self.filename or "",
            extraction=self.extracted,
            chunk_count=max(len(self.chunks), 1),
            failed_chunks=self.failed_chunks,
            providers_used=providers,
            total_tokens=self.total_tokens,
            estimated_cost_usd=self.total_cost_usd,
            duration_seconds=duration_seconds,
            completed_at=datetime.now(UTC),
        )
