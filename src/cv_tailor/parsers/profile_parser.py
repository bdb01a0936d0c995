"""Applicant profile loading and boundary validation."""

from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from cv_tailor.errors import ValidationError, from_pydantic
from cv_tailor.models.profile import ApplicantProfile
from cv_tailor.parsers.jd_parser import load_structured_file


def validate_profile(profile: ApplicantProfile | Mapping) -> ApplicantProfile:
    """Return *profile* as an ApplicantProfile, enforcing all size caps."""
    if isinstance(profile, ApplicantProfile):
        return profile
    if not isinstance(profile, Mapping):
        raise ValidationError("Invalid applicant profile: expected an object")
    try:
        return ApplicantProfile.model_validate(dict(profile))
    except PydanticValidationError as exc:
        raise from_pydantic(exc, "applicant profile") from exc


def load_profile_file(file_path: str | Path) -> ApplicantProfile:
    """Load an applicant profile from a YAML or JSON file."""
    path = Path(file_path)
    if path.suffix.lower() not in (".yaml", ".yml", ".json"):
        raise ValidationError(f"Unsupported profile format: {path.suffix}")
    return validate_profile(load_structured_file(path))
