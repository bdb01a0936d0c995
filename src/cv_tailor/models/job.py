"""Pydantic models for job postings and extracted requirements."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

ExperienceLevel = Literal["junior", "mid", "senior"]

RequirementText = Annotated[str, Field(max_length=1000)]
SkillName = Annotated[str, Field(max_length=200)]


class JobPosting(BaseModel):
    """Raw job posting as supplied by the caller."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str = Field(min_length=1, max_length=200, alias="jobTitle")
    company: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=50_000, alias="jobDescription")
    requirements: list[RequirementText] = Field(default_factory=list, max_length=100)
    preferred_skills: list[SkillName] = Field(
        default_factory=list, max_length=100, alias="preferredSkills"
    )
    location: str | None = Field(default=None, max_length=200)
    salary_range: str | None = Field(default=None, max_length=100, alias="salaryRange")

    def full_text(self) -> str:
        """Title, description and explicit skill lists joined for scanning."""
        return " ".join(
            [
                self.title,
                self.description,
                " ".join(self.requirements),
                " ".join(self.preferred_skills),
            ]
        )


class RequirementRecord(BaseModel):
    """Normalized requirement signal derived from a JobPosting."""

    model_config = ConfigDict(frozen=True)

    job_title: str
    company: str
    key_skills: list[str]
    required_skills: list[str]
    preferred_skills: list[str]
    keywords: list[str]
    experience_level: ExperienceLevel = "mid"
    location: str | None = None
    salary_range: str | None = None
    contact_emails: list[str] = []
    hiring_manager_name: str | None = None

    @property
    def all_skills(self) -> list[str]:
        """Key skills followed by the caller's explicit skill lists."""
        return [*self.key_skills, *self.required_skills, *self.preferred_skills]
