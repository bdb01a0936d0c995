"""Pydantic models for the tailored CV document."""

from __future__ import annotations

from pydantic import BaseModel

from cv_tailor.models.profile import EducationEntry, PersonalInfo, ProjectEntry, SkillSet


class TailoredExperience(BaseModel):
    job_title: str
    company: str
    location: str | None = None
    duration: str
    description: str  # may contain **emphasis** markers
    achievements: list[str]


class TailoredDocument(BaseModel):
    """Job-specific reshaping of an ApplicantProfile, consumed by a renderer."""

    personal_info: PersonalInfo
    summary: str
    experience: list[TailoredExperience]
    education: list[EducationEntry]
    skills: SkillSet
    projects: list[ProjectEntry] = []
