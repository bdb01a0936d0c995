"""Date parsing and employment-duration formatting."""

from __future__ import annotations

import re
from datetime import date, datetime

INVALID_START = "Invalid start date"
PRESENT = "Present"

# Tried in order; the first format that parses wins.
_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m",
    "%Y/%m/%d",
    "%Y/%m",
    "%Y.%m",
    "%m/%Y",
    "%b %Y",
    "%B %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y",
)

_YEAR_RE = re.compile(r"\d{4}")


def parse_date(value: str | None) -> date | None:
    """Parse a calendar date from common CV date shapes, or return None."""
    if not value:
        return None
    text = value.strip()
    if not text:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def month_year(value: date) -> str:
    return value.strftime("%b %Y")


def format_duration(start_date: str | None, end_date: str | None = None) -> str:
    """Format a start/end pair as ``"Jan 2020 – Mar 2022"``.

    An unparseable start yields ``INVALID_START``. A missing, blank,
    ``"present"`` or unparseable end is rendered as ``Present``.
    """
    start = parse_date(start_date)
    if start is None:
        return INVALID_START

    if not end_date or not end_date.strip() or end_date.strip().lower() == "present":
        return f"{month_year(start)} – {PRESENT}"

    end = parse_date(end_date)
    if end is None:
        return f"{month_year(start)} – {PRESENT}"
    return f"{month_year(start)} – {month_year(end)}"


def max_year(text: str) -> int:
    """Largest 4-digit number in *text*, or 0 when there is none."""
    years = [int(y) for y in _YEAR_RE.findall(text)]
    return max(years) if years else 0


def months_between(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def total_experience_years(entries, today: date | None = None) -> int:
    """Approximate total years across experience entries.

    Open-ended entries run until *today*. Returns 0 for no entries and at
    least 1 otherwise.
    """
    if not entries:
        return 0
    today = today or date.today()

    total_months = 0
    for entry in entries:
        start = parse_date(entry.start_date)
        if not entry.end_date or entry.end_date.strip().lower() in ("", "present"):
            end = today
        else:
            end = parse_date(entry.end_date)
        if start is None or end is None:
            continue
        total_months += max(0, months_between(start, end))

    # Halves round up
    return max(1, int(total_months / 12 + 0.5))
