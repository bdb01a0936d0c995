"""Reshape an ApplicantProfile into a job-specific TailoredDocument.

All functions here are pure. Highlighting adds ``**`` emphasis markers for
the renderer; every matching decision is made on the original,
un-highlighted profile text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import date

from cv_tailor.models.document import TailoredDocument, TailoredExperience
from cv_tailor.models.job import RequirementRecord
from cv_tailor.models.profile import ApplicantProfile, ExperienceEntry, ProjectEntry, SkillSet
from cv_tailor.utils.dates import format_duration, max_year, parse_date

logger = logging.getLogger(__name__)

MAX_PROJECTS = 3
PROGRESSION_LEAD_IN = "Career progression through multiple roles: "

_EMPHASIS_RE = re.compile(r"\*\*(.+?)\*\*")


# ---------------------------------------------------------------------------
# Summary and skills
# ---------------------------------------------------------------------------


def tailor_summary(summary: str, req: RequirementRecord) -> str:
    """Mention missing key skills and lean toward the requested seniority.

    The seniority tweak is a literal first-occurrence replacement of
    "experienced" and is case-sensitive.
    """
    tailored = summary
    for skill in req.key_skills:
        if skill.lower() not in tailored.lower():
            tailored += f" Experienced with {skill}."

    if req.experience_level == "senior" and "senior" not in tailored.lower():
        tailored = tailored.replace("experienced", "senior experienced", 1)
    return tailored


def _skill_matches(skill: str, wanted: Iterable[str]) -> bool:
    lowered = skill.lower()
    return any(
        w.lower() in lowered or lowered in w.lower()
        for w in wanted
        if w.strip()
    )


def prioritize_skills(skills: list[str], wanted: list[str]) -> list[str]:
    """Stable partition: matching skills first, original order within each."""
    matched = [s for s in skills if _skill_matches(s, wanted)]
    rest = [s for s in skills if not _skill_matches(s, wanted)]
    return matched + rest


# ---------------------------------------------------------------------------
# Highlighting
# ---------------------------------------------------------------------------


def highlight_terms(text: str, terms: Iterable[str]) -> str:
    """Wrap whole-word, case-insensitive occurrences of *terms* in ``**``.

    The original casing of the matched text is kept.
    """
    highlighted = text
    for term in terms:
        if not term.strip():
            continue
        pattern = re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)
        # Skip text that is already emphasized to avoid nested markers
        parts = _EMPHASIS_RE.split(highlighted)
        for i in range(0, len(parts), 2):
            parts[i] = pattern.sub(lambda m: f"**{m.group(0)}**", parts[i])
        for i in range(1, len(parts), 2):
            parts[i] = f"**{parts[i]}**"
        highlighted = "".join(parts)
    return highlighted


def strip_emphasis(text: str) -> str:
    """Remove ``**`` emphasis markers added by highlight_terms."""
    return _EMPHASIS_RE.sub(r"\1", text)


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------


def _start_key(entry: ExperienceEntry) -> date:
    # Unparseable start dates sort as oldest
    return parse_date(entry.start_date) or date.min


def most_recent_role(entries: list[ExperienceEntry]) -> ExperienceEntry | None:
    """Entry with the latest start date, whatever order *entries* are in."""
    if not entries:
        return None
    return max(entries, key=_start_key)


def _tailor_single(entry: ExperienceEntry, req: RequirementRecord) -> TailoredExperience:
    return TailoredExperience(
        job_title=entry.job_title,
        company=entry.company,
        location=entry.location,
        duration=format_duration(entry.start_date, entry.end_date),
        description=highlight_terms(entry.description, req.key_skills),
        achievements=[highlight_terms(a, req.keywords) for a in entry.achievements],
    )


def consolidate_roles(
    company: str,
    entries: list[ExperienceEntry],
    req: RequirementRecord,
) -> TailoredExperience:
    """Merge several roles at one company into a single progression entry."""
    newest_first = sorted(entries, key=_start_key, reverse=True)
    most_recent = newest_first[0]
    earliest = newest_first[-1]
    oldest_first = list(reversed(newest_first))

    earlier_titles = [e.job_title for e in oldest_first[:-1]]
    title = f"{most_recent.job_title} (Previously: {', '.join(earlier_titles)})"

    descriptions = [
        highlight_terms(e.description, req.key_skills)
        for e in newest_first
        if e.description.strip()
    ]
    if len(descriptions) > 1:
        description = PROGRESSION_LEAD_IN + " ".join(descriptions)
    else:
        description = descriptions[0] if descriptions else ""

    achievements: dict[str, None] = {}
    for entry in newest_first:
        for achievement in entry.achievements:
            tailored = highlight_terms(achievement, req.keywords)
            if tailored.strip():
                achievements.setdefault(tailored, None)

    progression = " → ".join(
        f"{e.job_title} ({format_duration(e.start_date, e.end_date)})" for e in oldest_first
    )
    summary = f"Progressed through {len(entries)} roles: {progression}"

    return TailoredExperience(
        job_title=title,
        company=company,
        location=most_recent.location,
        duration=format_duration(earliest.start_date, most_recent.end_date),
        description=description,
        achievements=[summary, *achievements],
    )


def group_and_tailor_experience(
    experience: list[ExperienceEntry],
    req: RequirementRecord,
) -> list[TailoredExperience]:
    """Group roles by company, consolidate, and order by most recent year.

    Final ordering uses the largest year found in each formatted duration
    string, so "Present" ranks by its start year only.
    """
    groups: dict[str, list[ExperienceEntry]] = {}
    for entry in experience:
        groups.setdefault(entry.company.strip(), []).append(entry)

    tailored: list[TailoredExperience] = []
    for company, entries in groups.items():
        if len(entries) == 1:
            tailored.append(_tailor_single(entries[0], req))
        else:
            logger.debug("Consolidating %d roles at one company", len(entries))
            tailored.append(consolidate_roles(company, entries, req))

    return sorted(tailored, key=lambda e: max_year(e.duration), reverse=True)


# ---------------------------------------------------------------------------
# Projects and document assembly
# ---------------------------------------------------------------------------


def select_projects(
    projects: list[ProjectEntry],
    skills: list[str],
    limit: int = MAX_PROJECTS,
) -> list[ProjectEntry]:
    """Projects using any of *skills* (substring, case-insensitive), in order."""
    wanted = [s.lower() for s in skills if s.strip()]
    relevant = [
        p for p in projects
        if any(skill in tech.lower() for tech in p.technologies for skill in wanted)
    ]
    return relevant[:limit]


def tailor(profile: ApplicantProfile, req: RequirementRecord) -> TailoredDocument:
    """Build the TailoredDocument for *profile* against *req*."""
    wanted_skills = req.all_skills
    skills = SkillSet(
        technical=prioritize_skills(list(profile.skills.technical), wanted_skills),
        soft=list(profile.skills.soft),
        languages=list(profile.skills.languages),
        certifications=list(profile.skills.certifications),
    )
    return TailoredDocument(
        personal_info=profile.personal_info,
        summary=tailor_summary(profile.summary, req),
        experience=group_and_tailor_experience(profile.experience, req),
        education=list(profile.education),
        skills=skills,
        projects=select_projects(profile.projects, req.key_skills),
    )
