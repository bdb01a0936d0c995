"""Output path validation to prevent path traversal.

All file writes go through these helpers: the filename is sanitized, the
directory is normalized (and optionally confined to an allowed base), and
the final joined path is re-checked for containment after resolution.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from cv_tailor.errors import PathSecurityError, ValidationError

logger = logging.getLogger(__name__)

_HOSTILE_CHARS = re.compile(r'[<>:"|?*/\\]')


def sanitize_file_name(name: str) -> str:
    """Reduce *name* to a safe, non-hidden base filename.

    Raises ValidationError if nothing usable is left.
    """
    if not isinstance(name, str) or not name:
        raise ValidationError("Invalid filename provided")

    # Keep only the last path component, for either separator style
    sanitized = re.split(r"[/\\]", name)[-1]
    sanitized = sanitized.replace("..", "")
    sanitized = sanitized.replace("\0", "")
    sanitized = _HOSTILE_CHARS.sub("_", sanitized)

    if not sanitized.strip():
        raise ValidationError("Filename is invalid after sanitization")

    if sanitized.startswith("."):
        sanitized = "_" + sanitized
    return sanitized


def _is_within(path: Path, base: Path) -> bool:
    try:
        path.relative_to(base)
    except ValueError:
        return False
    return True


def normalize_output_dir(path: str | Path, allowed_base: str | Path | None = None) -> Path:
    """Resolve *path* to an absolute directory path.

    When *allowed_base* is given, the resolved path must lie inside it.
    """
    if not path or not isinstance(path, (str, Path)):
        raise ValidationError("Invalid output path provided")

    clean = str(path).replace("\0", "")
    resolved = Path(os.path.expanduser(clean)).resolve()

    if allowed_base is not None:
        base = Path(allowed_base).resolve()
        if not _is_within(resolved, base):
            logger.warning("Rejected output dir %s outside %s", resolved, base)
            raise PathSecurityError("output directory escapes allowed base")
    return resolved


def join_safely(base: str | Path, *segments: str) -> Path:
    """Join *segments* onto *base* and verify the result stays inside it."""
    cleaned = [segment.replace("\0", "").replace("..", "") for segment in segments]

    resolved_base = Path(base).resolve()
    resolved = resolved_base.joinpath(*cleaned).resolve()

    # Segments are already cleaned; containment is still re-checked on the
    # resolved result (absolute segments and symlinks can escape otherwise).
    if not _is_within(resolved, resolved_base):
        logger.warning("Rejected joined path %s outside %s", resolved, resolved_base)
        raise PathSecurityError("joined path escapes base directory")
    return resolved


def ensure_directory(path: Path) -> Path:
    """Create *path* if missing; fail if it exists and is not a directory."""
    if path.exists() and not path.is_dir():
        raise ValidationError("Output path exists but is not a directory")
    path.mkdir(parents=True, exist_ok=True)
    return path
