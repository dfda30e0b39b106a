"""
Date helpers for ledger bucketing. All ledger timestamps are UTC.
"""

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bucket(value: datetime) -> date:
    """Calendar day (UTC) a timestamp belongs to."""
    return ensure_utc(value).date()


def month_key(value: datetime) -> str:
    """YYYY-MM key (UTC) used by monthly breakdowns."""
    return ensure_utc(value).strftime("%Y-%m")
