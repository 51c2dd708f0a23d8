"""CV draft record: the canonical, schema-valid structured résumé."""

from __future__ import annotations

from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, HttpUrl, StringConstraints
from pydantic.alias_generators import to_camel

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class DraftModel(BaseModel):
    """Base for draft sections: camelCase on the wire, unknown keys carried along."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class Header(DraftModel):
    """Name, headline title and optional photo."""

    name: NonEmptyStr = Field(description="Candidate full name")
    title: NonEmptyStr = Field(description="Current or target job title")
    photo_url: HttpUrl | None = Field(default=None, description="Portrait photo URL")


class PersonalDetails(DraftModel):
    """Personal details block.

    Only ``languages`` is mandatory: nationality, date of birth and marital
    status are stripped by the EHS PII rule, so a normalized draft must stay
    valid without them. When present they must be non-empty.
    """

    nationality: NonEmptyStr | None = Field(default=None, description="Nationality")
    languages: list[NonEmptyStr] = Field(min_length=1, description="Spoken languages")
    date_of_birth: NonEmptyStr | None = Field(
        default=None,
        validation_alias=AliasChoices("dateOfBirth", "dob", "date_of_birth"),
        serialization_alias="dateOfBirth",
        description="Date of birth",
    )
    marital_status: NonEmptyStr | None = Field(default=None, description="Marital status")


class ExperienceItem(DraftModel):
    """One job entry."""

    role: NonEmptyStr = Field(description="Job title held")
    company: NonEmptyStr = Field(description="Employer name")
    start_date: NonEmptyStr = Field(description="Start date, 'Mon YYYY' after normalization")
    end_date: NonEmptyStr = Field(description="End date, 'Mon YYYY' or 'Present'")
    bullets: list[NonEmptyStr] = Field(min_length=1, description="Achievements and duties")


class EducationItem(DraftModel):
    """One education entry."""

    degree: NonEmptyStr = Field(description="Degree or qualification")
    institution: NonEmptyStr = Field(description="School or university")
    start_date: NonEmptyStr = Field(description="Start date")
    end_date: NonEmptyStr = Field(description="End date")
    details: list[NonEmptyStr] = Field(min_length=1, description="Grades, modules, honours")


class Audit(DraftModel):
    """Append-only record of fired rules and detected problems."""

    rules_applied: list[NonEmptyStr] = Field(default_factory=list)
    issues: list[NonEmptyStr] = Field(default_factory=list)


class Typography(DraftModel):
    """Document typography the renderer must apply."""

    font: NonEmptyStr
    photo_size: NonEmptyStr
    date_format: NonEmptyStr


class CvDraft(DraftModel):
    """Structured résumé that satisfies every required-field invariant."""

    header: Header
    personal_details: PersonalDetails
    profile: NonEmptyStr = Field(description="Professional summary")
    experience: list[ExperienceItem] = Field(min_length=1)
    education: list[EducationItem] = Field(min_length=1)
    skills: list[NonEmptyStr] = Field(min_length=1)
    interests: list[NonEmptyStr] = Field(min_length=1)
    audit: Audit = Field(default_factory=Audit)
    typography: Typography | None = Field(default=None)

    def to_payload(self) -> dict[str, object]:
        """Dump to the camelCase JSON-ready dict used across the pipeline."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
