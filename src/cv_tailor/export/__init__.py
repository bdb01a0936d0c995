"""Document export for cv-tailor."""
from cv_tailor.export.renderer import (
    EXTENSIONS,
    DocumentRenderer,
    OutputFormat,
    parse_format,
)
from cv_tailor.export.style import PAGE_SIZES, StyleOptions

__all__ = [
    "DocumentRenderer",
    "OutputFormat",
    "EXTENSIONS",
    "parse_format",
    "StyleOptions",
    "PAGE_SIZES",
]
