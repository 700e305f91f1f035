from datetime import UTC, date, datetime, time

import pytest
import pytz

from slotwise.core.dates import (
    as_utc,
    date_key,
    day_of_week,
    get_tz,
    iter_dates,
    localize,
    month_bounds,
    parse_date_key,
    parse_hhmm,
    to_naive_utc,
)
from slotwise.core.errors import ValidationError


class TestParseHHMM:
    def test_valid_times(self):
        assert parse_hhmm("00:00") == time(0, 0)
        assert parse_hhmm("09:30") == time(9, 30)
        assert parse_hhmm("23:59") == time(23, 59)

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon", "", "09:00:00", None])
    def test_malformed_times_are_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_hhmm(value)


class TestDateKey:
    def test_plain_date(self):
        assert date_key(date(2025, 3, 9)) == "2025-03-09"

    def test_naive_datetime_uses_wall_clock(self):
        assert date_key(datetime(2025, 3, 9, 23, 45)) == "2025-03-09"

    def test_aware_datetime_is_keyed_in_local_zone(self):
        # 03:30 UTC on the 10th is still the evening of the 9th in Bogota
        bogota = pytz.timezone("America/Bogota")
        instant = datetime(2025, 3, 10, 3, 30, tzinfo=UTC)
        assert date_key(instant, bogota) == "2025-03-09"
        assert date_key(instant, pytz.utc) == "2025-03-10"

    def test_east_of_utc(self):
        tokyo = pytz.timezone("Asia/Tokyo")
        instant = datetime(2025, 3, 9, 20, 0, tzinfo=UTC)
        assert date_key(instant, tokyo) == "2025-03-10"


def test_parse_date_key():
    assert parse_date_key("2024-02-29") == date(2024, 2, 29)
    with pytest.raises(ValidationError):
        parse_date_key("2025-02-29")
    with pytest.raises(ValidationError):
        parse_date_key("2025-3-1")


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2025, 3, 9)) == 0  # Sunday
    assert day_of_week(date(2025, 3, 10)) == 1  # Monday
    assert day_of_week(date(2025, 3, 15)) == 6  # Saturday


def test_iter_dates_is_inclusive():
    days = list(iter_dates(date(2025, 2, 27), date(2025, 3, 2)))
    assert days == [date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1), date(2025, 3, 2)]


class TestMonthBounds:
    def test_leap_february(self):
        assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))

    def test_december(self):
        assert month_bounds("2025-12") == (date(2025, 12, 1), date(2025, 12, 31))

    @pytest.mark.parametrize("value", ["2025-13", "2025-00", "2025/03", "March"])
    def test_invalid_month(self, value):
        with pytest.raises(ValidationError):
            month_bounds(value)


def test_unknown_timezone():
    with pytest.raises(ValidationError):
        get_tz("Mars/Olympus_Mons")


def test_localize_and_utc_helpers():
    bogota = get_tz("America/Bogota")
    local = localize(date(2025, 3, 10), time(9, 0), bogota)
    assert as_utc(local) == datetime(2025, 3, 10, 14, 0, tzinfo=UTC)
    assert to_naive_utc(local) == datetime(2025, 3, 10, 14, 0)
    assert as_utc(datetime(2025, 3, 10, 14, 0)) == datetime(2025, 3, 10, 14, 0, tzinfo=UTC)
