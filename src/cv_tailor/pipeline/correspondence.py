"""Cover letter and outreach email composition.

Both documents are derived from the same ApplicantProfile and
RequirementRecord so facts and tone stay consistent. Where the wording has
alternatives (opening and closing sentences), the variant is picked by an
injected ``Chooser`` so output can be made exactly reproducible.
"""

from __future__ import annotations

import random
import re
from collections.abc import Callable, Sequence
from datetime import date

from cv_tailor.errors import ValidationError
from cv_tailor.models.correspondence import (
    CorrespondenceModel,
    CoverLetter,
    EmailDraft,
    EmailRecipient,
    EmailSender,
    EmailTemplateType,
    LetterRecipient,
)
from cv_tailor.models.job import RequirementRecord
from cv_tailor.models.profile import ApplicantProfile, PersonalInfo
from cv_tailor.pipeline.profile_tailor import most_recent_role
from cv_tailor.utils.dates import total_experience_years

# Given the number of variants, return the index to use.
Chooser = Callable[[int], int]

DEFAULT_ATTACHMENTS = ("CV.pdf", "Cover_Letter.pdf")

_CRLF_RE = re.compile(r"[\r\n]")


def first_choice(count: int) -> int:
    return 0


def seeded_choice(seed: int | str) -> Chooser:
    """Chooser backed by its own seeded RNG; same seed, same sequence."""
    rng = random.Random(seed)
    return lambda count: rng.randrange(count)


def random_choice(rng: random.Random | None = None) -> Chooser:
    rng = rng or random.Random()
    return lambda count: rng.randrange(count)


def _pick(options: Sequence[str], chooser: Chooser) -> str:
    index = chooser(len(options))
    if not 0 <= index < len(options):
        raise ValueError(f"Chooser returned out-of-range index {index}")
    return options[index]


def strip_crlf(text: str | None) -> str:
    """Remove CR/LF so a value cannot inject extra email header lines."""
    if not text:
        return ""
    return _CRLF_RE.sub("", text)


def _greeting(hiring_manager_name: str | None) -> str:
    return f"Dear {hiring_manager_name}" if hiring_manager_name else "Dear Hiring Manager"


def matching_skills(skills: list[str], wanted: list[str]) -> list[str]:
    """Skills that match *wanted* by substring in either direction."""
    result = []
    for skill in skills:
        lowered = skill.lower()
        if any(w.lower() in lowered or lowered in w.lower() for w in wanted if w.strip()):
            result.append(skill)
    return result


# ---------------------------------------------------------------------------
# Cover letter
# ---------------------------------------------------------------------------


def opening_variants(job_title: str, company: str, greeting: str) -> tuple[str, ...]:
    return (
        f"{greeting},\n\nI am writing to express my strong interest in the {job_title} "
        f"position at {company}. With my proven track record and passion for excellence, "
        "I am excited about the opportunity to contribute to your team's success.",
        f"{greeting},\n\nI was delighted to discover the {job_title} opening at {company}. "
        "Your company's reputation for innovation and excellence aligns perfectly with my "
        "career aspirations and professional values.",
        f"{greeting},\n\nI am excited to submit my application for the {job_title} role at "
        f"{company}. Having researched your organization extensively, I am impressed by your "
        "commitment to quality and would welcome the opportunity to contribute to your "
        "continued growth.",
    )


def closing_variants(job_title: str, company: str) -> tuple[str, ...]:
    return (
        f"I am enthusiastic about the possibility of joining {company} and contributing to "
        "your continued success. I would welcome the opportunity to discuss how my background "
        "and passion for excellence can benefit your team. Thank you for considering my "
        "application.",
        f"I am excited about the opportunity to bring my skills and enthusiasm to the "
        f"{job_title} role at {company}. I look forward to discussing how I can contribute to "
        "your team's goals and would appreciate the chance to speak with you further about "
        "this position.",
        "Thank you for taking the time to review my application. I am confident that my "
        f"experience and dedication make me a strong candidate for the {job_title} position, "
        f"and I would be thrilled to discuss how I can contribute to {company}'s continued "
        "growth and success.",
    )


def _experience_paragraph(
    profile: ApplicantProfile, req: RequirementRecord, today: date | None
) -> str:
    years = total_experience_years(profile.experience, today)
    paragraph = (
        f"In my {years} years of professional experience, I have developed a comprehensive "
        "skill set that directly aligns with your requirements for this "
        f"{req.job_title} position. "
    )
    recent = most_recent_role(profile.experience)
    if recent is not None:
        paragraph += f"Most recently, as {recent.job_title} at {recent.company}, I have successfully "
        relevant = [
            a for a in recent.achievements
            if any(skill.lower() in a.lower() for skill in req.key_skills)
        ]
        if relevant:
            paragraph += ", and ".join(relevant[:2]).lower()
        else:
            paragraph += "delivered impactful results and exceeded performance expectations"
        paragraph += "."
    return paragraph.strip()


def _skills_paragraph(profile: ApplicantProfile, req: RequirementRecord) -> str:
    technical = list(profile.skills.technical)
    matched = matching_skills(technical, req.key_skills)

    paragraph = "My technical expertise includes "
    if matched:
        paragraph += ", ".join(matched[:5])
        paragraph += ", which directly supports the requirements outlined in your job posting."
    else:
        paragraph += ", ".join(technical[:5])
        paragraph += ", providing a strong foundation for this role."

    soft = list(profile.skills.soft)
    if soft:
        paragraph += (
            f" Additionally, my strong {', '.join(soft[:3]).lower()} skills enable me to "
            "collaborate effectively and drive results in dynamic environments."
        )
    return paragraph


def _projects_paragraph(profile: ApplicantProfile, req: RequirementRecord) -> str:
    wanted = [s.lower() for s in req.key_skills]
    relevant = [
        p for p in profile.projects
        if any(skill in tech.lower() for tech in p.technologies for skill in wanted)
    ]

    paragraph = "I am particularly excited about this opportunity because "
    if relevant:
        project = relevant[0]
        description = project.description.rstrip(".").lower() or "deliver complete solutions"
        paragraph += f"my recent work on {project.name} demonstrates my ability to {description}. "
        paragraph += (
            f"This project utilized {', '.join(project.technologies[:3])}, "
            "technologies that are directly relevant to your needs."
        )
    else:
        paragraph += (
            "your company's focus on innovation aligns perfectly with my passion for tackling "
            "complex challenges and delivering high-quality solutions. I am eager to bring my "
            "problem-solving abilities and technical expertise to contribute meaningfully to "
            "your team's objectives."
        )
    return paragraph


def signature_block(info: PersonalInfo) -> str:
    signature = f"Sincerely,\n{info.full_name}"
    details = [d for d in (info.email, info.phone, info.linkedin) if d]
    if details:
        signature += "\n" + " | ".join(details)
    return signature


def compose_cover_letter(
    profile: ApplicantProfile,
    req: RequirementRecord,
    *,
    hiring_manager_name: str | None = None,
    email_address: str | None = None,
    chooser: Chooser = first_choice,
    today: date | None = None,
) -> CoverLetter:
    """Compose a cover letter.

    The hiring manager and recipient address default to what was extracted
    from the posting. ``today`` only affects the years-of-experience figure.
    """
    manager = hiring_manager_name or req.hiring_manager_name
    address = email_address or (req.contact_emails[0] if req.contact_emails else None)

    body = [
        _experience_paragraph(profile, req, today),
        _skills_paragraph(profile, req),
    ]
    if profile.projects:
        body.append(_projects_paragraph(profile, req))

    return CoverLetter(
        personal_info=profile.personal_info,
        recipient=LetterRecipient(
            company_name=req.company,
            job_title=req.job_title,
            hiring_manager_name=manager,
            email_address=address,
        ),
        opening=_pick(opening_variants(req.job_title, req.company, _greeting(manager)), chooser),
        body=body,
        closing=_pick(closing_variants(req.job_title, req.company), chooser),
        signature=signature_block(profile.personal_info),
    )


# ---------------------------------------------------------------------------
# Email
# ---------------------------------------------------------------------------

_SUBJECTS = {
    EmailTemplateType.APPLICATION: "Application for {title} Position at {company}",
    EmailTemplateType.FOLLOW_UP: "Following up on {title} Application - {company}",
    EmailTemplateType.INQUIRY: "Inquiry about {title} Opportunity at {company}",
    EmailTemplateType.THANK_YOU: "Thank you for the {title} interview - {company}",
}


def email_subject(req: RequirementRecord, template_type: EmailTemplateType) -> str:
    return _SUBJECTS[template_type].format(title=req.job_title, company=req.company)


def _sign_off(info: PersonalInfo) -> str:
    lines = ["Best regards,", strip_crlf(info.full_name), strip_crlf(info.email)]
    if info.phone:
        lines.append(strip_crlf(info.phone))
    return "\n".join(lines)


def _application_body(
    profile: ApplicantProfile, req: RequirementRecord, today: date | None
) -> list[str]:
    info = profile.personal_info
    technical = list(profile.skills.technical)
    matched = matching_skills(technical, req.key_skills)[:4] or technical[:4]
    years = total_experience_years(profile.experience, today)
    phone = strip_crlf(info.phone) or "via email"
    return [
        f"I hope this email finds you well. I am writing to express my strong interest in the "
        f"{req.job_title} position at {req.company}. After reviewing the job requirements, I am "
        "confident that my background and skills align perfectly with what you are seeking.",
        f"With {years} years of professional experience, I bring expertise in "
        f"{', '.join(matched)}. My proven track record of delivering high-quality results and "
        "my passion for excellence make me an ideal candidate for this role.",
        "I have attached my CV and cover letter for your review. These documents provide "
        "detailed information about my experience, achievements, and how I can contribute to "
        f"{req.company}'s continued success.",
        "I would welcome the opportunity to discuss how my skills and enthusiasm can benefit "
        f"your team. Please feel free to contact me at {strip_crlf(info.email)} or {phone} to "
        "schedule a conversation.",
        "Thank you for considering my application. I look forward to hearing from you soon.",
    ]


def _follow_up_body(req: RequirementRecord) -> list[str]:
    return [
        f"I hope you are doing well. I wanted to follow up on my application for the "
        f"{req.job_title} position at {req.company}, which I submitted on [DATE].",
        "I remain very interested in this opportunity and believe my skills and experience "
        "would be a valuable addition to your team. If you need any additional information or "
        "would like to schedule an interview, please don't hesitate to reach out.",
        "I understand that you likely receive many applications, and I appreciate the time you "
        "take to review each one. I look forward to the possibility of discussing how I can "
        f"contribute to {req.company}'s success.",
        "Thank you for your time and consideration.",
    ]


def _inquiry_body(req: RequirementRecord) -> list[str]:
    return [
        f"I hope this email finds you well. I am reaching out to inquire about the "
        f"{req.job_title} position at {req.company}. I am very interested in this opportunity "
        "and would like to learn more about the role and your team.",
        f"Based on my research of {req.company} and the position requirements, I believe my "
        "background would be a strong fit. I would appreciate the opportunity to discuss how "
        "my skills and experience align with your needs.",
        "Would it be possible to schedule a brief conversation to learn more about this "
        "position? I am flexible with timing and can accommodate your schedule.",
        "Thank you for your time, and I look forward to hearing from you.",
    ]


def _thank_you_body(req: RequirementRecord) -> list[str]:
    return [
        f"Thank you for taking the time to interview me for the {req.job_title} position at "
        f"{req.company} today. I enjoyed our conversation and learning more about the role and "
        "your team's goals.",
        "Our discussion reinforced my enthusiasm for this opportunity. I am particularly excited "
        "about [SPECIFIC ASPECT DISCUSSED] and how I can contribute to "
        f"{req.company}'s success in this area.",
        "If you need any additional information or references, please don't hesitate to reach "
        "out. I look forward to the next steps in the process.",
        "Thank you again for your time and consideration.",
    ]


def email_body(
    profile: ApplicantProfile,
    req: RequirementRecord,
    template_type: EmailTemplateType,
    hiring_manager_name: str | None = None,
    today: date | None = None,
) -> str:
    if template_type is EmailTemplateType.APPLICATION:
        paragraphs = _application_body(profile, req, today)
    elif template_type is EmailTemplateType.FOLLOW_UP:
        paragraphs = _follow_up_body(req)
    elif template_type is EmailTemplateType.INQUIRY:
        paragraphs = _inquiry_body(req)
    else:
        paragraphs = _thank_you_body(req)

    greeting = _greeting(strip_crlf(hiring_manager_name)) + ","
    return "\n\n".join([greeting, *paragraphs, _sign_off(profile.personal_info)])


def compose_email(
    profile: ApplicantProfile,
    req: RequirementRecord,
    *,
    recipient_email: str | None = None,
    template_type: EmailTemplateType | str = EmailTemplateType.APPLICATION,
    hiring_manager_name: str | None = None,
    today: date | None = None,
) -> EmailDraft:
    """Compose an outreach email; header fields are CRLF-stripped."""
    try:
        template_type = EmailTemplateType(template_type)
    except ValueError as exc:
        allowed = ", ".join(t.value for t in EmailTemplateType)
        raise ValidationError(f"Unknown email template type. Expected one of: {allowed}") from exc

    recipient = recipient_email or (req.contact_emails[0] if req.contact_emails else None)
    if not recipient:
        raise ValidationError("No recipient email provided or found in the job posting")

    manager = hiring_manager_name or req.hiring_manager_name
    info = profile.personal_info
    req = req.model_copy(
        update={"job_title": strip_crlf(req.job_title), "company": strip_crlf(req.company)}
    )
    return EmailDraft(
        sender=EmailSender(name=strip_crlf(info.full_name), email=strip_crlf(info.email)),
        recipient=EmailRecipient(
            email=strip_crlf(recipient),
            name=strip_crlf(manager) or None,
            company=strip_crlf(req.company),
        ),
        subject=strip_crlf(email_subject(req, template_type)),
        body=email_body(profile, req, template_type, manager, today),
        attachments=list(DEFAULT_ATTACHMENTS),
        template_type=template_type,
    )


def compose(
    profile: ApplicantProfile,
    req: RequirementRecord,
    *,
    recipient_email: str | None = None,
    chooser: Chooser = first_choice,
    today: date | None = None,
) -> CorrespondenceModel:
    """Cover letter plus, when a recipient is known, an application email."""
    letter = compose_cover_letter(
        profile, req, email_address=recipient_email, chooser=chooser, today=today
    )
    email = None
    if recipient_email or req.contact_emails:
        email = compose_email(profile, req, recipient_email=recipient_email, today=today)
    return CorrespondenceModel(cover_letter=letter, email=email)
