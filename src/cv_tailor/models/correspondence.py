"""Pydantic models for cover letters and outreach emails."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from cv_tailor.models.profile import PersonalInfo


class EmailTemplateType(str, Enum):
    APPLICATION = "application"
    FOLLOW_UP = "follow_up"
    INQUIRY = "inquiry"
    THANK_YOU = "thank_you"


class LetterRecipient(BaseModel):
    company_name: str
    job_title: str
    hiring_manager_name: str | None = None
    email_address: str | None = None


class CoverLetter(BaseModel):
    personal_info: PersonalInfo
    recipient: LetterRecipient
    opening: str
    body: list[str]
    closing: str
    signature: str


class EmailSender(BaseModel):
    name: str
    email: str


class EmailRecipient(BaseModel):
    email: str
    company: str
    name: str | None = None


class EmailDraft(BaseModel):
    sender: EmailSender
    recipient: EmailRecipient
    subject: str
    body: str
    attachments: list[str]
    template_type: EmailTemplateType = EmailTemplateType.APPLICATION


class CorrespondenceModel(BaseModel):
    """Cover letter and email derived from the same profile/requirements pair."""

    cover_letter: CoverLetter
    email: EmailDraft | None = None
