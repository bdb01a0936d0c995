"""Render tailored documents to text, Markdown, HTML or PDF and save them.

All formats derive from one Markdown intermediate (``export.markup``), so
their content cannot diverge. HTML goes through Python-Markdown with the
raw-HTML processors removed and a Jinja2 template with autoescape; text is
read back from that HTML; PDF is produced from it in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import date
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Union

import markdown
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from cv_tailor.errors import RenderError, ValidationError, diagnostics
from cv_tailor.export.markup import to_markdown
from cv_tailor.export.pdf_fallback import parse_html_to_lines
from cv_tailor.export.pdf_renderer import convert_html_to_pdf
from cv_tailor.export.style import TEMPLATES_DIR, StyleOptions, build_stylesheet
from cv_tailor.models.correspondence import CoverLetter, EmailDraft
from cv_tailor.models.document import TailoredDocument
from cv_tailor.utils.path_guard import (
    ensure_directory,
    join_safely,
    normalize_output_dir,
    sanitize_file_name,
)

if TYPE_CHECKING:
    from cv_tailor.config import RenderConfig

logger = logging.getLogger(__name__)

Renderable = Union[TailoredDocument, CoverLetter, EmailDraft]


class OutputFormat(str, Enum):
    TEXT = "text"
    MARKDOWN = "markdown"
    HTML = "html"
    PDF = "pdf"


EXTENSIONS: dict[OutputFormat, str] = {
    OutputFormat.TEXT: ".txt",
    OutputFormat.MARKDOWN: ".md",
    OutputFormat.HTML: ".html",
    OutputFormat.PDF: ".pdf",
}

DEFAULT_FILE_NAMES = {
    TailoredDocument: "professional_cv",
    CoverLetter: "cover_letter",
    EmailDraft: "email",
}

_EMAIL_FORMATS = (OutputFormat.TEXT, OutputFormat.MARKDOWN)
_RULE_WIDTH = 60


def parse_format(fmt: OutputFormat | str) -> OutputFormat:
    """Resolve a format name, rejecting anything outside the closed set."""
    if isinstance(fmt, OutputFormat):
        return fmt
    try:
        return OutputFormat(str(fmt).strip().lower())
    except ValueError:
        allowed = ", ".join(f.value for f in OutputFormat)
        raise ValidationError(f"Unsupported output format. Expected one of: {allowed}") from None


def markdown_to_html_body(md_text: str) -> str:
    """Convert Markdown to an HTML fragment with raw HTML passthrough disabled."""
    md = markdown.Markdown(extensions=["sane_lists", "nl2br"])
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    return md.convert(md_text)


def to_html(body_html: str, title: str, kind: str, css: str | None = None) -> str:
    """Wrap an HTML fragment in the page template."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=True,
    )
    template = env.get_template("base.html")
    return template.render(
        title=title,
        kind=kind,
        css=Markup(css) if css else None,
        body=Markup(body_html),
    )


def to_text(body_html: str) -> str:
    """Plain-text rendition of an HTML fragment."""
    out: list[str] = []

    def blank() -> None:
        if out and out[-1] != "":
            out.append("")

    for line_type, text in parse_html_to_lines(body_html):
        if line_type == "h1":
            blank()
            out += [text, "=" * len(text)]
        elif line_type == "h2":
            blank()
            out += [text.upper(), "-" * len(text)]
        elif line_type == "h3":
            blank()
            out.append(text)
        elif line_type == "bullet":
            out.append(f"• {text}")
        elif line_type == "text":
            out.append(text)
        elif line_type == "rule":
            blank()
            out += ["-" * _RULE_WIDTH, ""]
        else:
            blank()

    while out and out[-1] == "":
        out.pop()
    return "\n".join(out) + "\n"


def document_title(model: Renderable) -> str:
    if isinstance(model, TailoredDocument):
        return f"{model.personal_info.full_name} - CV"
    if isinstance(model, CoverLetter):
        return f"{model.personal_info.full_name} - Cover Letter"
    return model.subject


def _kind(model: Renderable) -> str:
    if isinstance(model, TailoredDocument):
        return "cv"
    if isinstance(model, CoverLetter):
        return "cover-letter"
    return "email"


def _write_bytes(path: Path, data: bytes) -> None:
    ensure_directory(path.parent)
    path.write_bytes(data)


class DocumentRenderer:
    """Renders tailored CVs, cover letters and emails.

    Style defaults and the PDF timeout come from the injected
    ``RenderConfig``; per-call style overrides are validated against the
    same whitelist before they reach a stylesheet.
    """

    def __init__(self, config: RenderConfig | None = None, *, temp_dir: str | Path | None = None):
        if config is None:
            from cv_tailor.config import RenderConfig

            config = RenderConfig()
        self.config = config
        self.temp_dir = temp_dir

    def resolve_style(self, style: StyleOptions | Mapping[str, str] | None) -> StyleOptions:
        if isinstance(style, StyleOptions):
            return style
        return self.config.style.merged(style)

    async def render(
        self,
        model: Renderable,
        fmt: OutputFormat | str,
        style: StyleOptions | Mapping[str, str] | None = None,
        *,
        letter_date: date | None = None,
    ) -> bytes:
        """Render *model* to bytes in the requested format."""
        fmt = parse_format(fmt)
        if not isinstance(model, (TailoredDocument, CoverLetter, EmailDraft)):
            raise ValidationError("Unsupported document type")
        if isinstance(model, EmailDraft) and fmt not in _EMAIL_FORMATS:
            raise ValidationError("Emails can only be rendered as text or markdown")
        style = self.resolve_style(style)

        md_text = to_markdown(model, letter_date=letter_date)
        if fmt is OutputFormat.MARKDOWN:
            return md_text.encode("utf-8")

        body = markdown_to_html_body(md_text)
        if fmt is OutputFormat.TEXT:
            return to_text(body).encode("utf-8")

        title = document_title(model)
        if fmt is OutputFormat.HTML:
            html = to_html(body, title, _kind(model), css=build_stylesheet(style))
            return html.encode("utf-8")

        # PDF styling comes from a temporary stylesheet file
        html = to_html(body, title, _kind(model))
        return await convert_html_to_pdf(
            html,
            style,
            timeout=self.config.timeout_seconds,
            temp_dir=self.temp_dir,
        )

    async def save(
        self,
        model: Renderable,
        fmt: OutputFormat | str,
        output_dir: str | Path,
        file_name: str | None = None,
        style: StyleOptions | Mapping[str, str] | None = None,
        *,
        allowed_base: str | Path | None = None,
        letter_date: date | None = None,
    ) -> Path:
        """Render *model* and write it inside *output_dir*.

        Returns the absolute path of the written file. Path problems raise
        ``PathSecurityError``; a write that fails or leaves no file
        raises ``RenderError``.
        """
        fmt = parse_format(fmt)
        directory = normalize_output_dir(output_dir, allowed_base)
        name = sanitize_file_name(file_name or DEFAULT_FILE_NAMES.get(type(model), "document"))
        extension = EXTENSIONS[fmt]
        if not name.lower().endswith(extension):
            name += extension
        target = join_safely(directory, name)

        data = await self.render(model, fmt, style, letter_date=letter_date)
        try:
            await asyncio.to_thread(_write_bytes, target, data)
        except OSError as exc:
            diagnostics.error("Writing %s failed: %s", target, exc, exc_info=exc)
            raise RenderError("Output file could not be written") from exc
        if not target.is_file():
            diagnostics.error("Output file missing after write: %s", target)
            raise RenderError("Output file was not created")

        logger.info("Saved %s document (%d bytes)", fmt.value, len(data))
        return target
