"""Whitelisted page-style parameters and stylesheet generation.

Every value is checked against a fixed pattern before it can reach a
stylesheet; nothing else is ever interpolated into CSS.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from cv_tailor.errors import ValidationError

TEMPLATES_DIR = Path(__file__).parent / "templates"

PAGE_SIZES = ("A4", "A3", "A5", "Letter", "Legal", "Tabloid")

MARGIN_RE = re.compile(r"\d+(\.\d+)?(mm|cm|in|px|pt)")
PIXEL_RE = re.compile(r"\d+px")
LINE_HEIGHT_RE = re.compile(r"\d+(\.\d+)?")

# Page sizes in millimetres (width, height)
PAGE_DIMENSIONS_MM = {
    "A3": (297.0, 420.0),
    "A4": (210.0, 297.0),
    "A5": (148.0, 210.0),
    "Letter": (215.9, 279.4),
    "Legal": (215.9, 355.6),
    "Tabloid": (279.4, 431.8),
}

_MM_PER_UNIT = {"mm": 1.0, "cm": 10.0, "in": 25.4, "pt": 25.4 / 72, "px": 25.4 / 96}

_MARGIN_FIELDS = ("margin_top", "margin_right", "margin_bottom", "margin_left")
_PIXEL_FIELDS = (
    "base_font_size",
    "h1_font_size",
    "h2_font_size",
    "h3_font_size",
    "paragraph_spacing",
    "section_spacing",
)


@dataclass(frozen=True)
class StyleOptions:
    page_size: str = "A4"
    margin_top: str = "10mm"
    margin_right: str = "10mm"
    margin_bottom: str = "10mm"
    margin_left: str = "10mm"
    base_font_size: str = "12px"
    line_height: str = "1.4"
    h1_font_size: str = "20px"
    h2_font_size: str = "15px"
    h3_font_size: str = "13px"
    paragraph_spacing: str = "8px"
    section_spacing: str = "12px"

    def __post_init__(self):
        if self.page_size not in PAGE_SIZES:
            raise ValidationError(
                f"page_size must be one of {', '.join(PAGE_SIZES)}"
            )
        for name in _MARGIN_FIELDS:
            if not MARGIN_RE.fullmatch(str(getattr(self, name))):
                raise ValidationError(
                    f"{name} must be a number with unit mm, cm, in, px or pt"
                )
        for name in _PIXEL_FIELDS:
            if not PIXEL_RE.fullmatch(str(getattr(self, name))):
                raise ValidationError(f"{name} must be a whole number of pixels, e.g. 12px")
        if not LINE_HEIGHT_RE.fullmatch(str(self.line_height)):
            raise ValidationError("line_height must be a number, e.g. 1.4")

    def merged(self, overrides: Mapping[str, str] | None) -> StyleOptions:
        """Return a copy with *overrides* applied (validated again)."""
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValidationError(f"Unknown style option(s): {', '.join(unknown)}")
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **{k: str(v) for k, v in values.items()})

    @property
    def margins_mm(self) -> tuple[float, float, float, float]:
        """(top, right, bottom, left) margins converted to millimetres."""
        return tuple(margin_to_mm(getattr(self, name)) for name in _MARGIN_FIELDS)


def margin_to_mm(value: str) -> float:
    match = MARGIN_RE.fullmatch(value)
    if not match:
        raise ValidationError("margin must be a number with unit mm, cm, in, px or pt")
    unit = match.group(2)
    return float(value[: -len(unit)]) * _MM_PER_UNIT[unit]


def build_stylesheet(style: StyleOptions) -> str:
    """Render the document stylesheet from validated options."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("stylesheet.css")
    return template.render(style=style)
