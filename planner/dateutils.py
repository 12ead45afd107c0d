"""Day keys and month geometry in the planner's reference time zone.

A day key is the ``YYYY-MM-DD`` form of a calendar date as observed in the
reference zone (``Asia/Seoul`` unless ``CALENDAR_TIMEZONE`` says otherwise),
so the host's locale and clock zone never change which cell a to-do lands in.
"""

from __future__ import annotations

import calendar
import os
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from planner.constants import DEFAULT_TIMEZONE, KOREAN_WEEKDAYS, MONTH_NAMES


def reference_timezone(tz_name: str | None = None) -> ZoneInfo:
    name = tz_name or os.getenv("CALENDAR_TIMEZONE") or DEFAULT_TIMEZONE
    return ZoneInfo(name)


def to_reference_date(value, tz_name: str | None = None) -> date:
    """Resolve ``value`` to the calendar date it falls on in the reference zone.

    Accepts aware or naive datetimes (naive ones are read as wall-clock time in
    the reference zone), plain dates, epoch milliseconds and ISO strings.
    """
    zone = reference_timezone(tz_name)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(zone).date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a date value")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).astimezone(zone).date()
    if isinstance(value, str):
        raw = value.strip()
        if len(raw) == 10:
            return date.fromisoformat(raw)
        return to_reference_date(datetime.fromisoformat(raw.replace("Z", "+00:00")), tz_name)
    raise TypeError(f"Unsupported date value: {value!r}")


def day_key(value, tz_name: str | None = None) -> str:
    return to_reference_date(value, tz_name).strftime("%Y-%m-%d")


def parse_day_key(key: str) -> date:
    return date.fromisoformat(str(key).strip())


def is_day_key(key) -> bool:
    try:
        return parse_day_key(key).isoformat() == key
    except (TypeError, ValueError):
        return False


def today_in_zone(tz_name: str | None = None) -> date:
    return datetime.now(reference_timezone(tz_name)).date()


def month_details(year: int, month: int) -> tuple[int, int]:
    """Return (weekday of the 1st with Sunday as 0, number of days)."""
    monday_based, days_in_month = calendar.monthrange(year, month)
    return (monday_based + 1) % 7, days_in_month


def month_grid(year: int, month: int) -> list[list[int | None]]:
    first_day, days_in_month = month_details(year, month)
    cells: list[int | None] = [None] * first_day + list(range(1, days_in_month + 1))
    while len(cells) % 7:
        cells.append(None)
    return [cells[idx : idx + 7] for idx in range(0, len(cells), 7)]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_title(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def format_long_date(value: date) -> str:
    weekday = KOREAN_WEEKDAYS[(value.weekday() + 1) % 7]
    return f"{value.year}년 {value.month}월 {value.day}일 ({weekday})"
