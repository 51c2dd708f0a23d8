"""Compliance report model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ComplianceReport(BaseModel):
    """How well a draft follows the EHS standards.

    Score and compliance are independent facts: a draft is compliant only when
    no issue was found, whatever its score.
    """

    compliant: bool = Field(description="True iff issues is empty")
    issues: list[str] = Field(default_factory=list, description="Itemized problems")
    score: int = Field(ge=0, le=100, description="100 minus a fixed penalty per issue")
