"""Heuristic extraction of a RequirementRecord from a job posting.

Extraction is lexical: a fixed skill vocabulary, keyword tokenization, and
an ordered list of phrase patterns for the hiring manager's name. It is a
pure function of its input and never raises for content reasons; only a
structurally invalid posting raises ValidationError.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping

from cv_tailor.models.job import ExperienceLevel, JobPosting, RequirementRecord
from cv_tailor.parsers.jd_parser import validate_posting

logger = logging.getLogger(__name__)

# Vocabulary order is the output order of RequirementRecord.key_skills.
TECH_SKILLS: tuple[str, ...] = (
    "javascript", "typescript", "python", "java", "c#", "react", "angular", "vue",
    "node.js", "express", "django", "flask", "spring", "docker", "kubernetes",
    "aws", "azure", "gcp", "git", "sql", "mongodb", "postgresql", "mysql",
    "html", "css", "bootstrap", "tailwind", "sass", "api", "rest", "graphql",
    "agile", "scrum", "devops", "ci/cd", "jenkins", "terraform",
)

STOP_WORDS = frozenset({
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
    "by", "is", "are", "was", "were", "be", "been", "have", "has", "had", "do",
    "does", "did", "will", "would", "could", "should", "may", "might", "must",
    "can", "a", "an",
})

MAX_KEYWORDS = 20

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
WORD_RE = re.compile(r"\b\w+\b")

_NAME = r"([A-Z][a-z]+\s+[A-Z][a-z]+)"
_TWO_CAPITALIZED_WORDS = re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+$")


def is_two_word_name(candidate: str) -> bool:
    """Exactly two capitalized words: rejects ALL-CAPS, one word, or three."""
    return bool(_TWO_CAPITALIZED_WORDS.match(candidate))


NamePattern = tuple[re.Pattern[str], Callable[[str], bool]]

# Evaluated in order; the first pattern yielding a valid candidate wins.
HIRING_MANAGER_PATTERNS: tuple[NamePattern, ...] = (
    (re.compile(r"contact\s+" + _NAME, re.IGNORECASE), is_two_word_name),
    (re.compile(r"reach\s+out\s+to\s+" + _NAME, re.IGNORECASE), is_two_word_name),
    (re.compile(r"hiring\s+manager[:\s]+" + _NAME, re.IGNORECASE), is_two_word_name),
    (re.compile(r"questions\?\s+contact\s+" + _NAME, re.IGNORECASE), is_two_word_name),
    (re.compile(_NAME + r"[,\s]+hiring\s+manager", re.IGNORECASE), is_two_word_name),
    (re.compile(r"please\s+send.+to\s+" + _NAME, re.IGNORECASE), is_two_word_name),
)


def find_key_skills(text: str) -> list[str]:
    lowered = text.lower()
    return [skill for skill in TECH_SKILLS if skill in lowered]


def detect_experience_level(text: str) -> ExperienceLevel:
    lowered = text.lower()
    if "senior" in lowered or "lead" in lowered:
        return "senior"
    if "junior" in lowered or "entry" in lowered:
        return "junior"
    return "mid"


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> list[str]:
    seen: dict[str, None] = {}
    for word in WORD_RE.findall(text.lower()):
        if len(word) > 3 and word not in STOP_WORDS:
            seen.setdefault(word, None)
    return list(seen)[:limit]


def extract_contact_emails(text: str) -> list[str]:
    return EMAIL_RE.findall(text)


def extract_hiring_manager_name(
    description: str,
    patterns: tuple[NamePattern, ...] = HIRING_MANAGER_PATTERNS,
) -> str | None:
    """Apply *patterns* in order and return the first accepted name."""
    for pattern, validator in patterns:
        match = pattern.search(description)
        if not match:
            continue
        candidate = match.group(1).strip()
        if validator(candidate):
            return candidate
        logger.debug("Rejected hiring manager candidate from %s", pattern.pattern)
    return None


def extract(posting: JobPosting | Mapping) -> RequirementRecord:
    """Derive a RequirementRecord from *posting*."""
    posting = validate_posting(posting)
    full_text = posting.full_text()

    record = RequirementRecord(
        job_title=posting.title,
        company=posting.company,
        key_skills=find_key_skills(full_text),
        required_skills=list(posting.requirements),
        preferred_skills=list(posting.preferred_skills),
        keywords=extract_keywords(full_text),
        experience_level=detect_experience_level(full_text),
        location=posting.location,
        salary_range=posting.salary_range,
        contact_emails=extract_contact_emails(full_text),
        hiring_manager_name=extract_hiring_manager_name(posting.description),
    )
    logger.debug(
        "Extracted %d skills, %d keywords, level=%s",
        len(record.key_skills),
        len(record.keywords),
        record.experience_level,
    )
    return record
