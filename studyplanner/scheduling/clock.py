from datetime import date, datetime, timedelta, timezone
from typing import Union

TimestampLike = Union[datetime, date, str]

ONE_DAY = timedelta(days=1)


def to_utc(value: TimestampLike) -> datetime:
    """
    Normalize a timestamp into an aware UTC datetime.

    • datetime without tzinfo is taken to already be UTC
    • date becomes midnight UTC of that calendar day
    • ISO-8601 strings are parsed (a trailing "Z" is accepted)
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid timestamp: {value!r}")

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")


def days_between(earlier: TimestampLike, later: TimestampLike) -> int:
    """Whole days from earlier to later, floored (negative if later < earlier)."""
    return (to_utc(later) - to_utc(earlier)) // ONE_DAY
