"""Date helpers shared by the validators, the workflow and the CLI."""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

DateLike = Union[str, date, datetime, None]


def parse_date(value: DateLike) -> Optional[datetime]:
    """Return an aware datetime, or None for empty input.

    Accepts ``date``, ``datetime`` and ISO-8601 strings (a trailing ``Z`` is
    allowed). Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(value: DateLike) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return "N/A"
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def days_between(start: DateLike, end: DateLike) -> int:
    first = parse_date(start)
    second = parse_date(end)
    if first is None or second is None:
        return 0
    seconds = abs((second - first).total_seconds())
    return math.ceil(seconds / 86400)


def to_iso_date(value: DateLike) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return ""
    return parsed.date().isoformat()


def today_local() -> date:
    """Today on the user's clock, which is what date pickers offer."""
    return date.today()


def is_in_past(value: DateLike, today: Optional[date] = None) -> bool:
    parsed = parse_date(value)
    if parsed is None:
        return False
    return parsed.date() < (today or today_local())


def add_days(value: DateLike, days: int) -> Optional[datetime]:
    parsed = parse_date(value)
    if parsed is None:
        return None
    return parsed + timedelta(days=days)
