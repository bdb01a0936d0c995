"""Tests for the typer CLI."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from cv_tailor.cli import app

runner = CliRunner()


@pytest.fixture
def files(tmp_path, monkeypatch, posting_data, profile_data):
    monkeypatch.chdir(tmp_path)
    for var in ("DEFAULT_OUTPUT_PATH", "TEMP_DIR", "PDF_TIMEOUT", "PDF_PAGE_SIZE"):
        monkeypatch.delenv(var, raising=False)
    posting = tmp_path / "posting.yaml"
    posting.write_text(yaml.safe_dump(posting_data), encoding="utf-8")
    profile = tmp_path / "profile.json"
    profile.write_text(json.dumps(profile_data), encoding="utf-8")
    return posting, profile


def test_sanitize():
    result = runner.invoke(app, ["sanitize", "../my cv?.pdf"])
    assert result.exit_code == 0
    assert "/" not in result.output.strip()
    assert "?" not in result.output


def test_formats():
    result = runner.invoke(app, ["formats"])
    assert result.exit_code == 0
    assert "markdown" in result.output


def test_extract_json(files):
    posting, _ = files
    result = runner.invoke(app, ["extract", str(posting), "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["experience_level"] == "senior"
    assert "python" in data["key_skills"]


def test_tailor_markdown(files, tmp_path):
    posting, profile = files
    out = tmp_path / "out"
    result = runner.invoke(
        app,
        ["tailor", str(posting), str(profile), "-f", "markdown", "-o", str(out), "--with-letter"],
    )
    assert result.exit_code == 0, result.output
    assert (out / "professional_cv.md").read_text(encoding="utf-8").startswith("# Alex Morgan")
    assert (out / "professional_cv_cover_letter.md").exists()
    assert (out / "professional_cv_email.md").exists()


def test_tailor_bad_format(files, tmp_path):
    posting, profile = files
    result = runner.invoke(app, ["tailor", str(posting), str(profile), "-f", "docx", "-o", str(tmp_path)])
    assert result.exit_code == 1
    assert "Unsupported output format" in result.output


def test_missing_file(files, tmp_path):
    _, profile = files
    result = runner.invoke(app, ["tailor", str(tmp_path / "nope.yaml"), str(profile)])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_email_to_console(files):
    posting, profile = files
    result = runner.invoke(app, ["email", str(posting), str(profile), "--type", "follow_up"])
    assert result.exit_code == 0, result.output
    assert "jobs@acme.example.com" in result.output
    assert "Best regards," in result.output


def test_email_honors_config(files, tmp_path):
    posting, profile = files
    bad = tmp_path / "bad.yaml"
    bad.write_text("render:\n  page_size: B5\n", encoding="utf-8")
    result = runner.invoke(app, ["email", str(posting), str(profile), "--config", str(bad)])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_email_to_file(files, tmp_path):
    posting, profile = files
    good = tmp_path / "good.yaml"
    good.write_text(f"output:\n  temp_dir: {tmp_path / 'tmp'}\n", encoding="utf-8")
    out = tmp_path / "mail"
    result = runner.invoke(
        app, ["email", str(posting), str(profile), "--config", str(good), "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "Best regards," in (out / "email.txt").read_text(encoding="utf-8")
