import datetime as dt
from typing import Any

_FALLBACK_FORMATS = ("%d-%m-%Y", "%d/%m/%Y", "%d.%m.%Y", "%Y/%m/%d")


def parse_date(value: Any) -> dt.date | None:
    """
    Read a calendar date from a date, datetime or string.

    Datetimes keep their own calendar day; no timezone conversion is applied.
    Anything unreadable yields None instead of raising.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def budget_period(value: Any) -> dt.date | None:
    parsed = parse_date(value)
    if parsed is None:
        return None
    return dt.date(parsed.year, parsed.month, 1)


def day_gaps(dates: list[dt.date]) -> list[int]:
    ordered = sorted(dates)
    return [(later - earlier).days for earlier, later in zip(ordered, ordered[1:])]
