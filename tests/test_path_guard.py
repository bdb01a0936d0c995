"""Tests for output path validation."""

import os

import pytest

from cv_tailor.errors import GENERIC_PATH_MESSAGE, PathSecurityError, ValidationError
from cv_tailor.utils.path_guard import (
    ensure_directory,
    join_safely,
    normalize_output_dir,
    sanitize_file_name,
)


class TestSanitizeFileName:
    def test_traversal(self):
        result = sanitize_file_name("../../etc/passwd")
        assert "/" not in result
        assert "\\" not in result
        assert ".." not in result
        assert result == "passwd"

    def test_windows_separators(self):
        assert sanitize_file_name("C:\\Users\\me\\cv") == "cv"

    def test_hostile_characters(self):
        assert sanitize_file_name('my<cv>:"x"|?*') == "my_cv___x____"

    def test_nul_removed(self):
        assert sanitize_file_name("cv\0.pdf") == "cv.pdf"

    def test_leading_dot(self):
        assert sanitize_file_name(".bashrc") == "_.bashrc"

    def test_plain_name_unchanged(self):
        assert sanitize_file_name("Alex_Morgan CV") == "Alex_Morgan CV"

    @pytest.mark.parametrize("name", ["", "..", "../", "   ", "\0"])
    def test_empty_result_rejected(self, name):
        with pytest.raises(ValidationError):
            sanitize_file_name(name)


class TestNormalizeOutputDir:
    def test_absolute(self, tmp_path):
        result = normalize_output_dir(str(tmp_path / "a" / ".." / "b"))
        assert result == (tmp_path / "b").resolve()
        assert result.is_absolute()

    def test_relative_becomes_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert normalize_output_dir("out") == (tmp_path / "out").resolve()

    def test_home_expanded(self):
        assert "~" not in str(normalize_output_dir("~/cvs"))

    def test_within_allowed_base(self, tmp_path):
        assert normalize_output_dir(tmp_path / "sub", allowed_base=tmp_path) == (tmp_path / "sub").resolve()

    def test_escape_allowed_base(self, tmp_path):
        base = tmp_path / "base"
        with pytest.raises(PathSecurityError) as exc_info:
            normalize_output_dir(base / ".." / "elsewhere", allowed_base=base)
        assert exc_info.value.user_message == GENERIC_PATH_MESSAGE
        assert str(tmp_path) not in exc_info.value.user_message

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            normalize_output_dir("")


class TestJoinSafely:
    def test_simple_join(self, tmp_path):
        assert join_safely(tmp_path, "cv.pdf") == (tmp_path / "cv.pdf").resolve()

    def test_parent_segment_rejected(self, tmp_path):
        with pytest.raises(PathSecurityError):
            join_safely(tmp_path, "../outside")

    def test_absolute_segment_rejected(self, tmp_path):
        with pytest.raises(PathSecurityError):
            join_safely(tmp_path / "base", "/etc/passwd")

    def test_nul_stripped(self, tmp_path):
        assert join_safely(tmp_path, "c\0v.txt") == (tmp_path / "cv.txt").resolve()

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlink_escape_rejected(self, tmp_path):
        base = tmp_path / "base"
        base.mkdir()
        outside = tmp_path / "outside"
        outside.mkdir()
        (base / "link").symlink_to(outside, target_is_directory=True)
        with pytest.raises(PathSecurityError):
            join_safely(base, "link", "cv.pdf")


class TestEnsureDirectory:
    def test_creates_nested(self, tmp_path):
        target = tmp_path / "a" / "b"
        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_file_in_the_way(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(ValidationError):
            ensure_directory(blocker)
