"""Pydantic models for the applicant profile.

Field names are snake_case; the camelCase names used by profile JSON files
(``fullName``, ``jobTitle``, ``graduationYear``...) are accepted as aliases.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$"
PHONE_PATTERN = r"^[\d\s\-\+\(\)\.]+$"
URL_PATTERN = r"^(https?://\S+)?$"

Skill = Annotated[str, Field(max_length=100)]
Certification = Annotated[str, Field(max_length=200)]
Achievement = Annotated[str, Field(max_length=1000)]
Honor = Annotated[str, Field(max_length=500)]


class _ProfileModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PersonalInfo(_ProfileModel):
    full_name: str = Field(min_length=1, max_length=200, alias="fullName")
    email: str = Field(max_length=254, pattern=EMAIL_PATTERN)
    phone: str | None = Field(default=None, max_length=50, pattern=PHONE_PATTERN)
    location: str | None = Field(default=None, max_length=200)
    linkedin: str | None = Field(default=None, max_length=500, pattern=URL_PATTERN, alias="linkedIn")
    github: str | None = Field(default=None, max_length=500, pattern=URL_PATTERN)
    website: str | None = Field(default=None, max_length=500, pattern=URL_PATTERN)

    def contact_items(self) -> list[str]:
        """Non-empty contact fields in display order."""
        items = [self.email, self.phone, self.location, self.linkedin, self.github, self.website]
        return [item for item in items if item]


class ExperienceEntry(_ProfileModel):
    job_title: str = Field(min_length=1, max_length=200, alias="jobTitle")
    company: str = Field(min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    start_date: str = Field(max_length=50, alias="startDate")
    end_date: str | None = Field(default=None, max_length=50, alias="endDate")
    description: str = Field(default="", max_length=5000)
    achievements: list[Achievement] = Field(default_factory=list, max_length=50)


class EducationEntry(_ProfileModel):
    degree: str = Field(min_length=1, max_length=200)
    institution: str = Field(min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    graduation_year: str = Field(max_length=10, alias="graduationYear")
    gpa: str | None = Field(default=None, max_length=20)
    honors: list[Honor] = Field(default_factory=list, max_length=20)


class SkillSet(_ProfileModel):
    technical: list[Skill] = Field(default_factory=list, max_length=100)
    soft: list[Skill] = Field(default_factory=list, max_length=50)
    languages: list[Skill] = Field(default_factory=list, max_length=30)
    certifications: list[Certification] = Field(default_factory=list, max_length=50)


class ProjectEntry(_ProfileModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    technologies: list[Skill] = Field(default_factory=list, max_length=50)
    url: str | None = Field(default=None, max_length=500, pattern=URL_PATTERN)


class ApplicantProfile(_ProfileModel):
    """Caller-supplied profile; list order is the caller's, not chronological."""

    personal_info: PersonalInfo = Field(alias="personalInfo")
    summary: str = Field(min_length=1, max_length=5000)
    experience: list[ExperienceEntry] = Field(default_factory=list, max_length=50)
    education: list[EducationEntry] = Field(default_factory=list, max_length=20)
    skills: SkillSet = Field(default_factory=SkillSet)
    projects: list[ProjectEntry] = Field(default_factory=list, max_length=50)
