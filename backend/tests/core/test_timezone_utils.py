from datetime import date, datetime, timedelta, timezone

import pytest

from fitclub.core.exceptions import ValidationException
from fitclub.core.timezone_utils import add_months, day_bounds, ensure_utc, parse_date_param


class TestParseDateParam:
    def test_valid_date(self):
        assert parse_date_param("2030-01-09") == date(2030, 1, 9)

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_date_param(" 2030-01-09 ") == date(2030, 1, 9)

    @pytest.mark.parametrize("value", ["2030-02-30", "09/01/2030", "", "tomorrow"])
    def test_invalid_dates(self, value):
        with pytest.raises(ValidationException) as exc_info:
            parse_date_param(value, "class_date")
        assert exc_info.value.code == "INVALID_DATE"
        assert exc_info.value.details["field"] == "class_date"


class TestAddMonths:
    def test_plain_month(self):
        start = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2030, 2, 7, 9, 0, tzinfo=timezone.utc)

    def test_clamps_to_month_end(self):
        start = datetime(2030, 1, 31, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2030, 2, 28, tzinfo=timezone.utc)

    def test_leap_year(self):
        start = datetime(2032, 1, 31, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2032, 2, 29, tzinfo=timezone.utc)

    def test_year_rollover(self):
        start = datetime(2030, 12, 15, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2031, 1, 15, tzinfo=timezone.utc)


def test_ensure_utc():
    naive = datetime(2030, 1, 7, 9, 0)
    shifted = datetime(2030, 1, 7, 11, 0, tzinfo=timezone(timedelta(hours=2)))

    assert ensure_utc(naive) == datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)
    assert ensure_utc(shifted).tzinfo == timezone.utc
    assert ensure_utc(shifted).hour == 9


def test_day_bounds():
    start, end = day_bounds(date(2030, 1, 9))

    assert start == datetime(2030, 1, 9, tzinfo=timezone.utc)
    assert end - start == timedelta(days=1)
