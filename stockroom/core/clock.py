"""UTC timestamp helpers.

Timestamps are stored as naive UTC ISO-8601 strings so that SQLite string
comparison orders them chronologically.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as a naive UTC datetime, truncated to seconds."""
    return datetime.now(UTC).replace(tzinfo=None, microsecond=0)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def to_db(value: datetime | None) -> str | None:
    """Serialize a datetime for storage."""
    if value is None:
        return None
    return to_naive_utc(value).isoformat(timespec="seconds")


def from_db(value: str | None) -> datetime | None:
    """Parse a stored timestamp, tolerating SQLite's space separator."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace(" ", "T"))
    except (ValueError, TypeError):
        return None
