"""Error taxonomy and safe user-facing error reporting.

Every error carries a ``user_message`` that is safe to show to a caller:
it never contains filesystem paths, stack traces or environment values.
Full diagnostic detail goes to the ``cv_tailor.diagnostics`` logger only.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

diagnostics = logging.getLogger("cv_tailor.diagnostics")

GENERIC_PATH_MESSAGE = "Invalid output path."
GENERIC_RENDER_MESSAGE = "Document generation failed. Please check your input and try again."
GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class CVTailorError(Exception):
    """Base class for all cv-tailor errors."""

    user_message: str = GENERIC_ERROR_MESSAGE


class ValidationError(CVTailorError, ValueError):
    """Malformed or oversized input, unknown format, disallowed style value.

    The message is specific but must only describe the offending field,
    never echo paths or environment values.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.user_message = message


class PathSecurityError(CVTailorError):
    """Raised when a path would traverse or escape its allowed directory."""

    user_message = GENERIC_PATH_MESSAGE


class RenderError(CVTailorError):
    """External conversion failure, timeout or missing output file."""

    user_message = GENERIC_RENDER_MESSAGE


def from_pydantic(exc: PydanticValidationError, label: str) -> ValidationError:
    """Summarize a pydantic error by field location and reason only.

    Input values are left out because they may be attacker-controlled.
    """
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or label
        problems.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return ValidationError(f"Invalid {label}: " + "; ".join(problems))


def report_error(exc: BaseException, context: str = "operation") -> str:
    """Log *exc* in full to the diagnostic sink and return a safe message."""
    diagnostics.error("%s failed: %s", context, exc, exc_info=exc)
    if isinstance(exc, CVTailorError):
        return exc.user_message
    return GENERIC_ERROR_MESSAGE
