"""HTML line parsing and fallback PDF rendering using fpdf2 (pure Python)."""

from __future__ import annotations

import html
import logging
import re
from io import BytesIO
from pathlib import Path

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from cv_tailor.export.style import PAGE_DIMENSIONS_MM, StyleOptions

logger = logging.getLogger(__name__)

# Unicode-capable font search paths (Linux, macOS, Windows)
_UNICODE_FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

_BLOCK_TAG_RE = re.compile(r"(</?(?:h[1-3]|p|li|ul|ol|hr|br)\s*/?>)")
_TAG_RE = re.compile(r"<(/?)(h[1-3]|p|li|ul|ol|hr|br)\s*/?>")
_NEXT_LINE = {"new_x": XPos.LMARGIN, "new_y": YPos.NEXT}


def _find_unicode_font() -> str | None:
    """Search for a Unicode-capable TTF font on the system."""
    for path in _UNICODE_FONT_PATHS:
        if Path(path).exists():
            return path
    return None


def html_to_pdf_fpdf2(html_content: str, style: StyleOptions | None = None) -> bytes:
    """Fallback PDF generation using fpdf2 when WeasyPrint is unavailable."""
    style = style or StyleOptions()
    body_match = re.search(r"<body[^>]*>(.*?)</body>", html_content, re.DOTALL)
    body = body_match.group(1) if body_match else html_content

    top, right, bottom, left = style.margins_mm
    pdf = FPDF(format=PAGE_DIMENSIONS_MM[style.page_size])
    pdf.set_margins(left=left, top=top, right=right)
    pdf.set_auto_page_break(auto=True, margin=bottom)
    pdf.add_page()

    font_name = "Helvetica"
    unicode_font = _find_unicode_font()
    if unicode_font:
        try:
            pdf.add_font("DocFont", "", unicode_font)
            font_name = "DocFont"
        except Exception:
            logger.debug("Failed to load font %s", unicode_font)

    base_size = int(style.base_font_size[:-2]) * 0.75  # px -> pt
    pdf.set_font(font_name, size=base_size)

    for line_type, text in parse_html_to_lines(body):
        safe_text = _safe_text(text, pdf)
        if line_type in ("h1", "h2", "h3"):
            size = int(getattr(style, f"{line_type}_font_size")[:-2]) * 0.75
            pdf.ln(2)
            pdf.set_font_size(size)
            pdf.multi_cell(0, size * 0.5, safe_text, **_NEXT_LINE)
            if line_type == "h1":
                pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
            pdf.ln(2)
            pdf.set_font_size(base_size)
        elif line_type == "bullet":
            pdf.multi_cell(0, base_size * 0.5, f"  - {safe_text}", **_NEXT_LINE)
        elif line_type == "text":
            pdf.multi_cell(0, base_size * 0.5, safe_text, **_NEXT_LINE)
        elif line_type in ("break", "rule"):
            pdf.ln(2)

    buf = BytesIO()
    pdf.output(buf)
    return buf.getvalue()


def _safe_text(text: str, pdf: FPDF) -> str:
    """Ensure text is encodable by the current font. Replace if needed."""
    if pdf.is_ttf_font:
        return text
    # Built-in fonts (Helvetica etc.) are latin-1 only
    try:
        text.encode("latin-1")
        return text
    except UnicodeEncodeError:
        return text.encode("latin-1", errors="replace").decode("latin-1")


def parse_html_to_lines(body_html: str) -> list[tuple[str, str]]:
    """Parse simple HTML into (type, text) pairs.

    Types are ``h1``-``h3``, ``bullet``, ``text``, ``break`` (end of a
    block) and ``rule``. Inline tags are dropped and entities decoded.
    """
    lines: list[tuple[str, str]] = []
    current_tag = "text"
    for part in _BLOCK_TAG_RE.split(body_html):
        part = part.strip()
        if not part:
            continue
        tag_match = _TAG_RE.match(part)
        if tag_match:
            closing = tag_match.group(1) == "/"
            tag = tag_match.group(2)
            if tag == "br":
                continue
            if tag == "hr":
                lines.append(("rule", ""))
            elif closing:
                if tag != "li":
                    lines.append(("break", ""))
                current_tag = "text"
            elif tag in ("h1", "h2", "h3"):
                current_tag = tag
            elif tag == "li":
                current_tag = "bullet"
            else:
                current_tag = "text"
        else:
            text = _strip_html(part)
            if text:
                lines.append((current_tag, text))
    return lines


def _strip_html(text: str) -> str:
    """Remove HTML tags and decode entities."""
    text = re.sub(r"<[^>]+>", "", text)
    return html.unescape(text).strip()
