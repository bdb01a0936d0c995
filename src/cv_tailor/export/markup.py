"""Serialize document models to the Markdown intermediate.

Every renderer derives its output from this Markdown, so the formats can
only differ in presentation. All user-controlled text passes through
``inline`` which HTML-escapes it and neutralizes Markdown syntax; the only
markup that survives from model text is the ``**`` emphasis added by the
tailoring step.
"""

from __future__ import annotations

import html
import re
from datetime import date

from cv_tailor.models.correspondence import CoverLetter, EmailDraft
from cv_tailor.models.document import TailoredDocument

_EMPHASIS_RE = re.compile(r"\*\*(.+?)\*\*")
_MD_SPECIAL_RE = re.compile(r"([\\`*_\[\]#])")
# Line starts that Markdown would read as a list, rule or setext underline
_BLOCK_START_RE = re.compile(r"^([-+=]|\d+(?=\.\s))")
_WHITESPACE_RE = re.compile(r"\s+")


def escape_text(text: str) -> str:
    """Make *text* inert in both Markdown and HTML (no trimming)."""
    text = html.escape(text, quote=False)
    return _MD_SPECIAL_RE.sub(r"\\\1", text)


def inline(text: str | None) -> str:
    """Escape *text* onto one line, keeping ``**emphasis**`` as Markdown bold."""
    if not text:
        return ""
    text = _WHITESPACE_RE.sub(" ", text).strip()
    out = []
    for i, part in enumerate(_EMPHASIS_RE.split(text)):
        out.append(f"**{escape_text(part)}**" if i % 2 else escape_text(part))
    result = "".join(out)
    # Numeric character reference for the first char keeps it literal
    return _BLOCK_START_RE.sub(lambda m: f"&#{ord(m.group(1)[0])};{m.group(1)[1:]}", result)


def paragraphs(text: str | None) -> list[str]:
    """Split multi-paragraph text on blank lines, escaping each paragraph."""
    if not text:
        return []
    return [inline(p) for p in re.split(r"\n\s*\n", text) if p.strip()]


def lines(text: str | None) -> str:
    """Escape each line of *text*, keeping single line breaks (nl2br)."""
    if not text:
        return ""
    return "\n".join(inline(line) for line in text.splitlines() if line.strip())


# ---------------------------------------------------------------------------
# CV
# ---------------------------------------------------------------------------


def cv_to_markdown(doc: TailoredDocument) -> str:
    info = doc.personal_info
    out: list[str] = [f"# {inline(info.full_name)}", ""]

    contact = [inline(item) for item in info.contact_items()]
    if contact:
        out += [f"**Contact:** {' | '.join(contact)}", ""]
    out += ["---", ""]

    out += ["## Professional Summary", "", inline(doc.summary), ""]

    out += ["## Skills", ""]
    skill_rows = (
        ("Technical Skills", doc.skills.technical),
        ("Soft Skills", doc.skills.soft),
        ("Languages", doc.skills.languages),
        ("Certifications", doc.skills.certifications),
    )
    for label, values in skill_rows:
        if values:
            out += [f"**{label}:** {', '.join(inline(v) for v in values)}", ""]

    out += ["## Experience", ""]
    for exp in doc.experience:
        out += [f"### {inline(exp.job_title)} | {inline(exp.company)}", ""]
        details = [inline(d) for d in (exp.location, exp.duration) if d]
        if details:
            out += [f"*{' | '.join(details)}*", ""]
        if exp.description:
            out += [inline(exp.description), ""]
        if exp.achievements:
            out += ["**Key Achievements:**", ""]
            out += [f"- {inline(a)}" for a in exp.achievements]
            out.append("")

    out += ["## Education", ""]
    for edu in doc.education:
        out += [f"### {inline(edu.degree)}", ""]
        details = [inline(d) for d in (edu.location, edu.graduation_year) if d]
        if edu.gpa:
            details.append(f"GPA: {inline(edu.gpa)}")
        line = f"**{inline(edu.institution)}**"
        if details:
            line += f" | *{' | '.join(details)}*"
        out += [line, ""]
        if edu.honors:
            out += [f"**Honors:** {', '.join(inline(h) for h in edu.honors)}", ""]

    if doc.projects:
        out += ["## Projects", ""]
        for project in doc.projects:
            out += [f"### {inline(project.name)}", ""]
            if project.url:
                out += [f"*Project URL: {inline(project.url)}*", ""]
            if project.description:
                out += [inline(project.description), ""]
            if project.technologies:
                techs = ", ".join(inline(t) for t in project.technologies)
                out += [f"**Technologies:** {techs}", ""]

    return "\n".join(out).rstrip() + "\n"


# ---------------------------------------------------------------------------
# Correspondence
# ---------------------------------------------------------------------------


def format_letter_date(value: date) -> str:
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def cover_letter_to_markdown(letter: CoverLetter, letter_date: date | None = None) -> str:
    """Cover letter Markdown.

    The letter date is the only time-dependent line; pass *letter_date* for
    reproducible output.
    """
    info = letter.personal_info
    out: list[str] = [f"# {inline(info.full_name)}", ""]

    contact = [inline(c) for c in (info.email, info.phone, info.location) if c]
    if contact:
        out += [" | ".join(contact), ""]

    out += [format_letter_date(letter_date or date.today()), ""]

    recipient = letter.recipient
    address = [
        inline(v)
        for v in (recipient.hiring_manager_name, recipient.company_name, recipient.email_address)
        if v
    ]
    out += ["\n".join(address), ""]
    out += [f"**Re: Application for {inline(recipient.job_title)} Position**", ""]

    for block in (letter.opening, *letter.body, letter.closing):
        for para in paragraphs(block):
            out += [para, ""]

    out += [lines(letter.signature), ""]
    return "\n".join(out).rstrip() + "\n"


def email_to_markdown(email: EmailDraft) -> str:
    sender = f"{inline(email.sender.name)} &lt;{inline(email.sender.email)}&gt;"
    to = inline(email.recipient.email)
    if email.recipient.name:
        to = f"{inline(email.recipient.name)} &lt;{to}&gt;"

    out: list[str] = [
        f"**From:** {sender}",
        f"**To:** {to}",
        f"**Subject:** {inline(email.subject)}",
    ]
    if email.attachments:
        out.append(f"**Attachments:** {', '.join(inline(a) for a in email.attachments)}")
    out += ["", "---", ""]

    for block in re.split(r"\n\s*\n", email.body):
        if block.strip():
            out += [lines(block), ""]
    return "\n".join(out).rstrip() + "\n"


def to_markdown(model, *, letter_date: date | None = None) -> str:
    """Markdown intermediate for any renderable model."""
    if isinstance(model, TailoredDocument):
        return cv_to_markdown(model)
    if isinstance(model, CoverLetter):
        return cover_letter_to_markdown(model, letter_date)
    if isinstance(model, EmailDraft):
        return email_to_markdown(model)
    raise TypeError(f"Cannot render {type(model).__name__}")
