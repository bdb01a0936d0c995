"""Main pipeline orchestrator - extraction, tailoring, composition, export."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from cv_tailor.config import AppConfig
from cv_tailor.export.renderer import EXTENSIONS, DocumentRenderer, OutputFormat, parse_format
from cv_tailor.export.style import StyleOptions
from cv_tailor.models.correspondence import CorrespondenceModel
from cv_tailor.models.document import TailoredDocument
from cv_tailor.models.job import JobPosting, RequirementRecord
from cv_tailor.models.profile import ApplicantProfile
from cv_tailor.parsers.jd_parser import validate_posting
from cv_tailor.parsers.profile_parser import validate_profile
from cv_tailor.parsers.requirement_extractor import extract
from cv_tailor.pipeline.correspondence import Chooser, compose, first_choice
from cv_tailor.pipeline.profile_tailor import tailor

logger = logging.getLogger(__name__)


def _strip_extension(name: str) -> str:
    """Drop a known output extension so suffixes go before it."""
    lower = name.lower()
    for extension in EXTENSIONS.values():
        if lower.endswith(extension) and len(name) > len(extension):
            return name[: -len(extension)]
    return name


@dataclass
class PipelineResult:
    """Complete result from the tailoring pipeline."""

    posting: JobPosting
    requirements: RequirementRecord
    document: TailoredDocument
    correspondence: CorrespondenceModel | None = None
    elapsed_seconds: float = 0.0
    saved: dict[str, Path] = field(default_factory=dict)


class TailoringPipeline:
    """Runs posting -> requirements -> tailored CV (-> correspondence)."""

    def __init__(self, config: AppConfig | None = None):
        self.config = config or AppConfig()
        self.renderer = DocumentRenderer(
            self.config.render,
            temp_dir=self.config.output.resolved_temp_dir,
        )

    def run(
        self,
        posting: JobPosting | Mapping,
        profile: ApplicantProfile | Mapping,
        *,
        with_correspondence: bool = False,
        recipient_email: str | None = None,
        chooser: Chooser = first_choice,
        today: date | None = None,
        on_phase: Callable[[str, str], None] | None = None,
    ) -> PipelineResult:
        """Run the tailoring pipeline.

        Args:
            posting: Job posting model or raw mapping (validated here).
            profile: Applicant profile model or raw mapping (validated here).
            with_correspondence: Also compose a cover letter and, when a
                recipient is known, an application email.
            recipient_email: Overrides the first contact email in the posting.
            chooser: Picks opening/closing variants of the cover letter.
            today: Reference date for experience totals.
            on_phase: Optional callback(phase_name, detail) for progress.
        """
        start = time.monotonic()

        def _notify(phase: str, detail: str = ""):
            if on_phase:
                on_phase(phase, detail)

        posting = validate_posting(posting)
        profile = validate_profile(profile)

        _notify("extract", "Analyzing job posting")
        req = extract(posting)
        logger.debug(
            "Extracted %d key skills, %d keywords, level=%s",
            len(req.key_skills), len(req.keywords), req.experience_level,
        )

        _notify("tailor", "Tailoring profile")
        document = tailor(profile, req)

        correspondence = None
        if with_correspondence:
            _notify("compose", "Composing correspondence")
            correspondence = compose(
                profile, req, recipient_email=recipient_email, chooser=chooser, today=today
            )

        elapsed = time.monotonic() - start
        _notify("done", f"Done in {elapsed:.2f}s")
        return PipelineResult(
            posting=posting,
            requirements=req,
            document=document,
            correspondence=correspondence,
            elapsed_seconds=elapsed,
        )

    async def save(
        self,
        result: PipelineResult,
        fmt: OutputFormat | str,
        output_dir: str | Path | None = None,
        *,
        file_name: str | None = None,
        style: StyleOptions | Mapping[str, str] | None = None,
        letter_date: date | None = None,
    ) -> dict[str, Path]:
        """Write the CV (and cover letter/email when composed) concurrently.

        Cover letters use *file_name* with a ``_cover_letter`` suffix; the
        email is always written as text.
        """
        fmt = parse_format(fmt)
        directory = output_dir or self.config.output.default_dir
        base = _strip_extension(file_name or "professional_cv")

        jobs: dict[str, object] = {
            "cv": self.renderer.save(result.document, fmt, directory, base, style),
        }
        if result.correspondence is not None:
            jobs["cover_letter"] = self.renderer.save(
                result.correspondence.cover_letter,
                fmt,
                directory,
                f"{base}_cover_letter",
                style,
                letter_date=letter_date,
            )
            if result.correspondence.email is not None:
                email_fmt = fmt if fmt is OutputFormat.MARKDOWN else OutputFormat.TEXT
                jobs["email"] = self.renderer.save(
                    result.correspondence.email, email_fmt, directory, f"{base}_email"
                )

        paths = await asyncio.gather(*jobs.values())
        result.saved.update(zip(jobs.keys(), paths))
        return dict(result.saved)
