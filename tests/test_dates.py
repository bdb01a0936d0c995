"""Tests for date parsing and duration formatting."""

from datetime import date

import pytest

from cv_tailor.models.profile import ExperienceEntry
from cv_tailor.utils.dates import (
    INVALID_START,
    format_duration,
    max_year,
    parse_date,
    total_experience_years,
)


class TestParseDate:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2020-01-15", date(2020, 1, 15)),
            ("2020-01", date(2020, 1, 1)),
            ("2020", date(2020, 1, 1)),
            ("2020/03", date(2020, 3, 1)),
            ("Mar 2020", date(2020, 3, 1)),
            ("March 2020", date(2020, 3, 1)),
            (" 2020-01 ", date(2020, 1, 1)),
        ],
    )
    def test_shapes(self, value, expected):
        assert parse_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", "2020-13"])
    def test_unparseable(self, value):
        assert parse_date(value) is None


class TestFormatDuration:
    def test_open_ended(self):
        assert format_duration("2020-01") == "Jan 2020 – Present"

    @pytest.mark.parametrize("end", [None, "", "  ", "present", "Present", "someday"])
    def test_present_end(self, end):
        assert format_duration("2020-01", end) == "Jan 2020 – Present"

    def test_closed_range(self):
        assert format_duration("2019-01", "2021-03") == "Jan 2019 – Mar 2021"

    def test_invalid_start(self):
        assert format_duration("not-a-date") == INVALID_START
        assert format_duration("not-a-date", "2021-01") == INVALID_START


def test_max_year():
    assert max_year("Jan 2019 – Mar 2021") == 2021
    assert max_year(INVALID_START) == 0


class TestTotalExperience:
    def _entry(self, start, end=None):
        return ExperienceEntry(job_title="Dev", company="Acme", start_date=start, end_date=end)

    def test_empty(self):
        assert total_experience_years([]) == 0

    def test_sum_of_ranges(self):
        entries = [self._entry("2018-01", "2020-01"), self._entry("2020-01", "2023-01")]
        assert total_experience_years(entries) == 5

    def test_open_ended_uses_today(self):
        entries = [self._entry("2020-06", "present")]
        assert total_experience_years(entries, today=date(2024, 6, 1)) == 4

    def test_minimum_one(self):
        entries = [self._entry("2024-01", "2024-02")]
        assert total_experience_years(entries) == 1

    def test_unparseable_skipped(self):
        entries = [self._entry("garbage", "2020-01"), self._entry("2018-01", "2020-01")]
        assert total_experience_years(entries) == 2

    @pytest.mark.parametrize(
        "start,end,expected",
        [
            ("2018-01", "2020-07", 3),
            ("2018-01", "2022-07", 5),
            ("2018-01", "2020-06", 2),
        ],
    )
    def test_half_years_round_up(self, start, end, expected):
        assert total_experience_years([self._entry(start, end)]) == expected
