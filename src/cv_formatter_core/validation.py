"""Schema validator: the only way a CvDraft comes into existence."""

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import lru_cache

import structlog
from pydantic import ValidationError

from cv_formatter_core.exceptions import DraftValidationError, FieldError
from cv_formatter_core.models.cv_draft import CvDraft

logger = structlog.get_logger()


def validate_cv_draft(candidate: object) -> CvDraft:
    """Accept or reject a structured candidate against the CvDraft schema.

    Extra keys are tolerated. Missing required fields, empty required arrays
    and empty (or whitespace-only) required strings are rejected.

    Raises:
        DraftValidationError: With one FieldError per violation.
    """
    if isinstance(candidate, CvDraft):
        candidate = candidate.to_payload()
    if not isinstance(candidate, Mapping):
        raise DraftValidationError(
            [FieldError(path="<root>", message=f"expected an object, got {type(candidate).__name__}")]
        )

    try:
        return CvDraft.model_validate(dict(candidate))
    except ValidationError as e:
        field_errors = [
            FieldError(
                path=".".join(str(part) for part in err["loc"]) or "<root>",
                message=err["msg"],
            )
            for err in e.errors()
        ]
        logger.debug("draft_validation_failed", error_count=len(field_errors))
        raise DraftValidationError(field_errors) from e


@lru_cache(maxsize=1)
def _cv_draft_schema_json() -> str:
    return json.dumps(CvDraft.model_json_schema(by_alias=True))


def cv_draft_json_schema() -> dict[str, object]:
    """JSON schema of the CvDraft record, camelCase keys.

    Every call returns a new dict, so callers may edit it freely.
    """
    return json.loads(_cv_draft_schema_json())  # type: ignore[no-any-return]
