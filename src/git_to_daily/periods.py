from __future__ import annotations

import calendar
import dataclasses
import datetime as dt

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclasses.dataclass(frozen=True)
class DateRange:
    start: dt.date  # inclusive
    end: dt.date  # inclusive

    @property
    def days(self) -> int:
        return max(0, (self.end - self.start).days + 1)


def as_date(value: dt.date | dt.datetime) -> dt.date:
    """Reduce a datetime to its local calendar date; dates pass through."""
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def parse_date(s: str) -> dt.date:
    s = (s or "").strip()
    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Invalid date: {s!r} (expected YYYY-MM-DD)") from None


def iso_week_number(value: dt.date | dt.datetime) -> int:
    return as_date(value).isocalendar()[1]


def iso_week_year(value: dt.date | dt.datetime) -> int:
    return as_date(value).isocalendar()[0]


def days_in_month(value: dt.date | dt.datetime) -> int:
    d = as_date(value)
    return calendar.monthrange(d.year, d.month)[1]


def previous_week_range(reference: dt.date | dt.datetime) -> DateRange:
    d = as_date(reference)
    this_monday = d - dt.timedelta(days=d.weekday())
    monday = this_monday - dt.timedelta(days=7)
    return DateRange(start=monday, end=monday + dt.timedelta(days=6))


def previous_month_range(reference: dt.date | dt.datetime) -> DateRange:
    d = as_date(reference)
    last_of_prev = dt.date(d.year, d.month, 1) - dt.timedelta(days=1)
    return DateRange(start=dt.date(last_of_prev.year, last_of_prev.month, 1), end=last_of_prev)


def format_date(value: dt.date | dt.datetime) -> str:
    d = as_date(value)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def format_week_id(value: dt.date | dt.datetime) -> str:
    year, week, _ = as_date(value).isocalendar()
    return f"{year:04d}-W{week:02d}"


def format_month_id(value: dt.date | dt.datetime) -> str:
    d = as_date(value)
    return f"{d.year:04d}-{d.month:02d}"


def format_month_name(value: dt.date | dt.datetime) -> str:
    d = as_date(value)
    return f"{MONTH_NAMES[d.month - 1]} {d.year}"


def short_month(d: dt.date) -> str:
    return MONTH_NAMES[d.month - 1][:3]


def format_short_date(d: dt.date) -> str:
    return f"{short_month(d)} {d.day}"


def weekday_abbr(d: dt.date) -> str:
    return WEEKDAY_ABBR[d.weekday()]


def format_date_range(start: dt.date | dt.datetime, end: dt.date | dt.datetime) -> str:
    s = as_date(start)
    e = as_date(end)
    if (s.year, s.month) == (e.year, e.month):
        return f"{short_month(s)} {s.day} - {e.day}, {e.year}"
    return f"{short_month(s)} {s.day} - {short_month(e)} {e.day}, {e.year}"


def dates_in_range(start: dt.date | dt.datetime, end: dt.date | dt.datetime) -> list[dt.date]:
    cur = as_date(start)
    last = as_date(end)
    out: list[dt.date] = []
    while cur <= last:
        out.append(cur)
        cur = cur + dt.timedelta(days=1)
    return out
