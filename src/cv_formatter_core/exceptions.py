"""Custom exception hierarchy for ehs-cv-formatter."""

from __future__ import annotations

from dataclasses import dataclass


class CvFormatterError(Exception):
    """Base exception for all ehs-cv-formatter errors."""

    stage: str = "pipeline"


class ConfigurationError(CvFormatterError):
    """Raised when settings do not allow any usable configuration."""

    stage = "configuration"


class ExtractionFailedError(CvFormatterError):
    """Raised when text cannot be extracted from the uploaded document."""

    stage = "extraction"


class UnsupportedFormatError(ExtractionFailedError):
    """Raised when the MIME type / extension combination is not recognized."""


class CorruptDocumentError(ExtractionFailedError):
    """Raised when a recognized format cannot be read."""


class EncryptedDocumentError(CorruptDocumentError):
    """Raised when a document is password-protected."""


class StructuringFailedError(CvFormatterError):
    """Raised when text cannot be turned into a structured CV draft."""

    stage = "structuring"


class ProviderFailureError(StructuringFailedError):
    """A single oracle attempt failed (error, timeout or schema violation)."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class AllProvidersFailedError(StructuringFailedError):
    """Raised when every configured provider failed for one text unit."""

    def __init__(self, failures: list[ProviderFailureError]) -> None:
        last = failures[-1] if failures else None
        msg = f"All {len(failures)} provider(s) failed"
        if last is not None:
            msg += f". Last error: {last}"
        super().__init__(msg)
        self.failures = failures


class NoViableChunksError(StructuringFailedError):
    """Raised when no chunk of an oversized document could be structured."""


@dataclass(frozen=True)
class FieldError:
    """A single field-level schema violation."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class DraftValidationError(CvFormatterError):
    """Raised when a candidate does not satisfy the CV draft schema."""

    stage = "validation"

    def __init__(self, field_errors: list[FieldError]) -> None:
        summary = "; ".join(str(e) for e in field_errors[:5])
        extra = len(field_errors) - 5
        if extra > 0:
            summary += f" (+{extra} more)"
        super().__init__(f"CV draft failed schema validation: {summary}")
        self.field_errors = field_errors


class CostLimitExceededError(CvFormatterError):
    """Raised when estimated oracle cost for a document exceeds the configured limit."""


class PipelineTimeoutError(CvFormatterError):
    """Raised when a pipeline step exceeds its time budget."""

    def __init__(self, step: str, timeout_seconds: float) -> None:
        super().__init__(f"Step '{step}' timed out after {timeout_seconds}s")
        self.step = step
        self.timeout_seconds = timeout_seconds
