"""Job posting loading and boundary validation."""

import json
import re
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from cv_tailor.errors import ValidationError, from_pydantic
from cv_tailor.models.job import JobPosting


def parse_jd(text: str) -> str:
    """Clean and normalize job description text."""
    # Remove excessive whitespace
    text = re.sub(r'\n{3,}', '\n\n', text)
    text = re.sub(r'[ \t]+', ' ', text)
    # Strip leading/trailing whitespace per line
    lines = [line.strip() for line in text.splitlines()]
    return '\n'.join(lines).strip()


def validate_posting(posting: JobPosting | Mapping) -> JobPosting:
    """Return *posting* as a JobPosting, raising ValidationError if malformed."""
    if isinstance(posting, JobPosting):
        return posting
    if not isinstance(posting, Mapping):
        raise ValidationError("Invalid job posting: expected an object")
    try:
        return JobPosting.model_validate(dict(posting))
    except PydanticValidationError as exc:
        raise from_pydantic(exc, "job posting") from exc


def load_structured_file(path: Path) -> dict:
    """Load a YAML or JSON mapping from *path*."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Malformed JSON in {path.name}") from exc
    else:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValidationError(f"Malformed YAML in {path.name}") from exc
    if not isinstance(data, dict):
        raise ValidationError(f"Expected a mapping in {path.name}")
    return data


def load_posting_file(
    file_path: str | Path,
    *,
    title: str | None = None,
    company: str | None = None,
) -> JobPosting:
    """Load a job posting from YAML/JSON, or from plain text plus title/company."""
    path = Path(file_path)
    if path.suffix.lower() in (".yaml", ".yml", ".json"):
        data = load_structured_file(path)
        if title:
            data.pop("jobTitle", None)
            data["title"] = title
        if company:
            data["company"] = company
        return validate_posting(data)

    description = parse_jd(path.read_text(encoding="utf-8"))
    return validate_posting(
        {"title": title or "", "company": company or "", "description": description}
    )
