from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

# Matches the SQLite storage format SQLAlchemy uses for DateTime columns, so
# rows written by raw statements and by the ORM sort and compare as text.
DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

Bound = Union[str, date, datetime, None]


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string and normalize to UTC-naive datetime.

    - None / "" -> None
    - "YYYY-MM-DDTHH:MM" (naive) is interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    # Accept trailing Z
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)

    # Normalize to UTC-naive
    if dt.tzinfo is None:
        # interpret naive as UTC
        return dt.replace(tzinfo=None)

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def to_db_timestamp(dt: datetime) -> str:
    """Serialize a datetime to the storage text format (UTC)."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.strftime(DB_TIMESTAMP_FORMAT)


def db_now() -> str:
    return to_db_timestamp(utcnow())


def range_bound(value: Bound, *, end: bool = False) -> Optional[str]:
    """
    Normalize a report/listing bound to a storage timestamp.

    Date-only values ("2024-03-01" or a date object) cover the whole day:
    as a start bound they mean 00:00:00, as an end bound 23:59:59.999999.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return to_db_timestamp(value)

    if isinstance(value, date):
        day = value
    else:
        s = value.strip()
        if not s:
            return None
        if len(s) == 10:
            day = date.fromisoformat(s)
        else:
            return to_db_timestamp(parse_iso_datetime(s))

    return to_db_timestamp(datetime.combine(day, time.max if end else time.min))


def resolve_range(start: Bound, end: Bound) -> Optional[tuple[str, str]]:
    """Both bounds, normalized, or None when either side is missing."""
    start_ts = range_bound(start)
    end_ts = range_bound(end, end=True)
    if start_ts is None or end_ts is None:
        return None
    return start_ts, end_ts


def trailing_range(days: int, now: Optional[datetime] = None) -> tuple[str, str]:
    """The window covering the last `days` days up to now."""
    end_dt = now or utcnow()
    return to_db_timestamp(end_dt - timedelta(days=days)), to_db_timestamp(end_dt)


def local_day_bounds(now: Optional[datetime] = None) -> tuple[str, str]:
    """
    Storage bounds of the current calendar day in the host's local timezone.

    Naive `now` is taken as local time.
    """
    local_now = (now or datetime.now()).astimezone()
    start_local = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    end_local = start_local + timedelta(days=1) - timedelta(microseconds=1)
    return to_db_timestamp(start_local), to_db_timestamp(end_local)
