"""Application configuration loaded from config.yaml and the environment."""

from __future__ import annotations

import os
import tempfile
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

import yaml

from cv_tailor.export.style import StyleOptions

# Environment variable -> RenderConfig field
_RENDER_ENV = {
    "PDF_PAGE_SIZE": "page_size",
    "PDF_MARGIN_TOP": "margin_top",
    "PDF_MARGIN_RIGHT": "margin_right",
    "PDF_MARGIN_BOTTOM": "margin_bottom",
    "PDF_MARGIN_LEFT": "margin_left",
    "PDF_BASE_FONT_SIZE": "base_font_size",
    "PDF_LINE_HEIGHT": "line_height",
    "PDF_H1_FONT_SIZE": "h1_font_size",
    "PDF_H2_FONT_SIZE": "h2_font_size",
    "PDF_H3_FONT_SIZE": "h3_font_size",
    "PDF_PARAGRAPH_SPACING": "paragraph_spacing",
    "PDF_SECTION_SPACING": "section_spacing",
}


@dataclass(frozen=True)
class OutputConfig:
    default_dir: str = "./output"
    temp_dir: str = field(default_factory=tempfile.gettempdir)

    def __post_init__(self):
        for name in ("default_dir", "temp_dir"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip() or "\0" in value:
                raise ValueError(f"output.{name} must be a non-empty path")

    @property
    def resolved_default_dir(self) -> Path:
        return Path(self.default_dir).expanduser().resolve()

    @property
    def resolved_temp_dir(self) -> Path:
        return Path(self.temp_dir).expanduser().resolve()


@dataclass(frozen=True)
class RenderConfig:
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
    timeout_seconds: float = 30.0

    def __post_init__(self):
        _ = self.style  # ValidationError names the bad field
        if not isinstance(self.timeout_seconds, (int, float)) or self.timeout_seconds <= 0:
            raise ValueError("render.timeout_seconds must be a positive number")

    @property
    def style(self) -> StyleOptions:
        values = asdict(self)
        values.pop("timeout_seconds")
        return StyleOptions(**{k: str(v) for k, v in values.items()})


@dataclass(frozen=True)
class AppConfig:
    output: OutputConfig = field(default_factory=OutputConfig)
    render: RenderConfig = field(default_factory=RenderConfig)


def _env_overrides(environ) -> tuple[dict, dict]:
    output: dict = {}
    render: dict = {}
    if environ.get("DEFAULT_OUTPUT_PATH"):
        output["default_dir"] = environ["DEFAULT_OUTPUT_PATH"]
    if environ.get("TEMP_DIR"):
        output["temp_dir"] = environ["TEMP_DIR"]
    if environ.get("PDF_TIMEOUT"):
        try:
            render["timeout_seconds"] = int(environ["PDF_TIMEOUT"]) / 1000
        except ValueError:
            raise ValueError("PDF_TIMEOUT must be a whole number of milliseconds") from None
    for var, name in _RENDER_ENV.items():
        if environ.get(var):
            render[name] = environ[var]
    return output, render


def _section(raw: dict, name: str, cls) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"config section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown {name} option(s): {', '.join(unknown)}")
    return dict(section)


def load_config(path: str | Path | None = None, environ=None) -> AppConfig:
    """Load config from YAML file, then apply environment overrides."""
    if environ is None:
        environ = os.environ
    if path is None:
        candidate = Path.cwd() / "config.yaml"
        if candidate.exists():
            path = candidate

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            if not isinstance(raw, dict):
                raise ValueError("config file must contain a mapping")

    output = _section(raw, "output", OutputConfig)
    render = _section(raw, "render", RenderConfig)
    env_output, env_render = _env_overrides(environ)
    output.update(env_output)
    render.update(env_render)

    return AppConfig(
        output=OutputConfig(**output),
        render=RenderConfig(**render),
    )
