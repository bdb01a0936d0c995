"""Data models for the CV tailoring pipeline."""

from cv_tailor.models.correspondence import (
    CorrespondenceModel,
    CoverLetter,
    EmailDraft,
    EmailRecipient,
    EmailSender,
    EmailTemplateType,
    LetterRecipient,
)
from cv_tailor.models.document import TailoredDocument, TailoredExperience
from cv_tailor.models.job import JobPosting, RequirementRecord
from cv_tailor.models.profile import (
    ApplicantProfile,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ProjectEntry,
    SkillSet,
)

__all__ = [
    "ApplicantProfile",
    "CorrespondenceModel",
    "CoverLetter",
    "EducationEntry",
    "EmailDraft",
    "EmailRecipient",
    "EmailSender",
    "EmailTemplateType",
    "ExperienceEntry",
    "JobPosting",
    "LetterRecipient",
    "PersonalInfo",
    "ProjectEntry",
    "RequirementRecord",
    "SkillSet",
    "TailoredDocument",
    "TailoredExperience",
]
