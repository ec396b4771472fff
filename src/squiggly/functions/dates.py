"""Date functions.

Values are converted to ``datetime`` first: ISO 8601 strings, epoch
milliseconds and ``date`` objects are all accepted. Naive datetimes
are treated as UTC where an absolute instant is needed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from squiggly.functions.coercion import to_datetime
from squiggly.functions.registry import squiggly_function


@squiggly_function()
def format_date(value: datetime | None, fmt: str | None = None) -> str | None:
    """``strftime`` with *fmt*, or ISO 8601 when no format is given."""
    if value is None:
        return None
    return value.isoformat() if fmt is None else value.strftime(fmt)


@squiggly_function()
def parse_date(value: str | None, fmt: str | None = None) -> datetime | None:
    if value is None:
        return None
    if fmt is None:
        return to_datetime(value)
    return datetime.strptime(value, fmt)


@squiggly_function()
def add_days(value: datetime | None, amount: int | float | None) -> datetime | None:
    return _shift(value, timedelta(days=amount or 0))


@squiggly_function()
def add_hours(value: datetime | None, amount: int | float | None) -> datetime | None:
    return _shift(value, timedelta(hours=amount or 0))


@squiggly_function()
def add_minutes(value: datetime | None, amount: int | float | None) -> datetime | None:
    return _shift(value, timedelta(minutes=amount or 0))


@squiggly_function()
def add_seconds(value: datetime | None, amount: int | float | None) -> datetime | None:
    return _shift(value, timedelta(seconds=amount or 0))


def _shift(value: datetime | None, delta: timedelta) -> datetime | None:
    return None if value is None else value + delta


@squiggly_function()
def timestamp(value: datetime | None) -> int | None:
    """Epoch milliseconds."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


@squiggly_function()
def year(value: datetime | None) -> int | None:
    return None if value is None else value.year


@squiggly_function()
def month(value: datetime | None) -> int | None:
    return None if value is None else value.month


@squiggly_function()
def day(value: datetime | None) -> int | None:
    return None if value is None else value.day
