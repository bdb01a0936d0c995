"""Tests for the Markdown intermediate."""

from datetime import date

import pytest

from cv_tailor.export.markup import (
    cover_letter_to_markdown,
    cv_to_markdown,
    email_to_markdown,
    escape_text,
    format_letter_date,
    inline,
    lines,
    paragraphs,
    to_markdown,
)
from cv_tailor.pipeline.correspondence import compose_cover_letter, compose_email


class TestEscaping:
    def test_html_and_markdown_specials(self):
        assert escape_text("<b>*x*</b>") == r"&lt;b&gt;\*x\*&lt;/b&gt;"

    def test_brackets_and_backticks(self):
        assert escape_text("[a](b) `c` #d _e_") == r"\[a\](b) \`c\` \#d \_e\_"

    def test_inline_keeps_emphasis(self):
        assert inline("**Python** <dev>") == "**Python** &lt;dev&gt;"

    def test_inline_collapses_whitespace(self):
        assert inline("  a\n  b ") == "a b"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("- not a list", "&#45; not a list"),
            ("+ plus", "&#43; plus"),
            ("=== rule", "&#61;== rule"),
            ("12. numbered", "&#49;2. numbered"),
            ("2020 was good", "2020 was good"),
        ],
    )
    def test_block_starts_neutralized(self, text, expected):
        assert inline(text) == expected

    def test_empty(self):
        assert inline(None) == ""
        assert paragraphs("") == []
        assert lines(None) == ""

    def test_paragraphs_and_lines(self):
        assert paragraphs("one\n\n  \n\ntwo <x>") == ["one", "two &lt;x&gt;"]
        assert lines("a\n\nb") == "a\nb"


class TestCV:
    def test_sections(self, tailored):
        md = cv_to_markdown(tailored)
        assert md.startswith("# Alex Morgan\n")
        for heading in ("## Professional Summary", "## Skills", "## Experience", "## Education", "## Projects"):
            assert heading in md
        assert "### Senior Engineer (Previously: Engineer) | Acme" in md
        assert "**Technical Skills:** Go, Python, Django, Docker, Excel" in md
        assert "- Migrated services to **Kubernetes**" in md
        assert "*Project URL: https://github.com/alexmorgan/shipit*" in md

    def test_no_projects_section_when_empty(self, tailored):
        md = cv_to_markdown(tailored.model_copy(update={"projects": []}))
        assert "## Projects" not in md

    def test_to_markdown_dispatch(self, tailored):
        assert to_markdown(tailored) == cv_to_markdown(tailored)
        with pytest.raises(TypeError):
            to_markdown("not a model")


class TestCorrespondence:
    def test_letter_date_single_line(self, profile, requirements):
        letter = compose_cover_letter(profile, requirements)
        md = cover_letter_to_markdown(letter, date(2024, 1, 5))
        assert md.count("January 5, 2024") == 1
        assert "**Re: Application for Senior Backend Engineer Position**" in md
        assert "Jane Doe\nAcme Corp\njobs@acme.example.com" in md

    def test_format_letter_date(self):
        assert format_letter_date(date(2024, 3, 9)) == "March 9, 2024"

    def test_email_headers(self, profile, requirements):
        md = email_to_markdown(compose_email(profile, requirements))
        assert "**From:** Alex Morgan &lt;alex@example.com&gt;" in md
        assert "**To:** Jane Doe &lt;jobs@acme.example.com&gt;" in md
        assert "**Attachments:** CV.pdf, Cover\\_Letter.pdf" in md
