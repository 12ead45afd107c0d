from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from planner.dateutils import (
    day_key,
    format_long_date,
    is_day_key,
    month_details,
    month_grid,
    month_title,
    parse_day_key,
    shift_month,
)


class TestDayKey:
    def test_same_instant_from_any_zone_maps_to_seoul_date(self):
        # 2024-03-09 23:30 in New York is already 2024-03-10 13:30 in Seoul.
        new_york = datetime(2024, 3, 9, 23, 30, tzinfo=ZoneInfo("America/New_York"))
        utc = new_york.astimezone(timezone.utc)
        seoul = new_york.astimezone(ZoneInfo("Asia/Seoul"))
        keys = {day_key(new_york, "Asia/Seoul"), day_key(utc, "Asia/Seoul"), day_key(seoul, "Asia/Seoul")}
        assert keys == {"2024-03-10"}

    def test_all_instants_of_one_seoul_day_share_a_key(self):
        start = datetime(2024, 3, 10, 0, 0, tzinfo=ZoneInfo("Asia/Seoul"))
        keys = {day_key(start + timedelta(minutes=offset), "Asia/Seoul") for offset in range(0, 24 * 60, 37)}
        assert keys == {"2024-03-10"}

    def test_naive_datetime_is_reference_wall_clock(self):
        assert day_key(datetime(2024, 3, 10, 0, 5), "Asia/Seoul") == "2024-03-10"
        assert day_key(datetime(2024, 3, 10, 23, 55), "Asia/Seoul") == "2024-03-10"

    def test_plain_date_and_canonical_string(self):
        assert day_key(date(2024, 1, 5)) == "2024-01-05"
        assert day_key("2024-01-05") == "2024-01-05"

    def test_epoch_milliseconds(self):
        instant = datetime(2024, 3, 9, 16, 0, tzinfo=timezone.utc)
        assert day_key(int(instant.timestamp() * 1000), "Asia/Seoul") == "2024-03-10"

    def test_iso_string_with_offset(self):
        assert day_key("2024-03-09T20:00:00Z", "Asia/Seoul") == "2024-03-10"

    @pytest.mark.parametrize("value", ["yesterday", "2024-13-01", None, True])
    def test_rejects_garbage(self, value):
        with pytest.raises((TypeError, ValueError)):
            day_key(value)


def test_parse_and_validate_day_key():
    assert parse_day_key("2024-02-29") == date(2024, 2, 29)
    assert is_day_key("2024-02-29")
    assert not is_day_key("2023-02-29")
    assert not is_day_key("2024-2-9")


class TestMonthGeometry:
    def test_month_details_sunday_based(self):
        # March 1st 2024 was a Friday.
        assert month_details(2024, 3) == (5, 31)
        # September 1st 2024 was a Sunday.
        assert month_details(2024, 9) == (0, 30)
        assert month_details(2024, 2) == (4, 29)

    def test_grid_pads_to_full_weeks(self):
        weeks = month_grid(2024, 3)
        flat = [cell for week in weeks for cell in week]
        assert all(len(week) == 7 for week in weeks)
        assert flat[:5] == [None] * 5
        assert flat[5] == 1
        assert [cell for cell in flat if cell is not None] == list(range(1, 32))

    def test_shift_month_wraps_years(self):
        assert shift_month(2024, 1, -1) == (2023, 12)
        assert shift_month(2024, 12, 1) == (2025, 1)
        assert shift_month(2024, 3, 0) == (2024, 3)


def test_titles():
    assert month_title(2024, 3) == "March 2024"
    assert format_long_date(date(2024, 3, 10)) == "2024년 3월 10일 (일)"
