"""Domain models for ehs-cv-formatter."""

from cv_formatter_core.models.compliance import ComplianceReport
from cv_formatter_core.models.cv_draft import (
    Audit,
    CvDraft,
    EducationItem,
    ExperienceItem,
    Header,
    PersonalDetails,
    Typography,
)
from cv_formatter_core.models.document import ExtractedText, RawDocument, TextChunk
from cv_formatter_core.models.run import (
    AgentError,
    ChunkResult,
    ProcessingRequest,
    ProcessingResult,
)

__all__ = [
    "AgentError",
    "Audit",
    "ChunkResult",
    "ComplianceReport",
    "CvDraft",
    "EducationItem",
    "ExperienceItem",
    "ExtractedText",
    "Header",
    "PersonalDetails",
    "ProcessingRequest",
    "ProcessingResult",
    "RawDocument",
    "TextChunk",
    "Typography",
]
