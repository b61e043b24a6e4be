from __future__ import annotations

import re
from datetime import date, datetime, timezone

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_timestamp(value: object) -> datetime | None:
    """Parse a backend timestamp into an aware datetime (UTC when unqualified).

    Accepts ISO-8601 strings (with or without time, `Z` suffix allowed),
    datetime/date objects and epoch milliseconds. Returns None when the value
    is missing or unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    raw = str(value).strip()
    if not raw:
        return None
    if raw.endswith("Z") or raw.endswith("z"):
        raw = raw[:-1] + "+00:00"
    if _DATE_ONLY_RE.match(raw):
        raw = f"{raw}T00:00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def format_display_date(value: datetime | None, *, with_time: bool = False) -> str:
    """`Jan 10, 2024` (or `Jan 10, 2024 9:30 AM`); `-` when absent."""
    if value is None:
        return "-"
    text = f"{value.strftime('%b')} {value.day}, {value.year}"
    if with_time:
        hour = value.hour % 12 or 12
        text += f" {hour}:{value.minute:02d} {'AM' if value.hour < 12 else 'PM'}"
    return text


def days_between(start: datetime | None, end: datetime | None) -> int | None:
    if start is None or end is None:
        return None
    return max(0, (end.date() - start.date()).days)
