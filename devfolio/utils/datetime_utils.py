"""
Datetime helpers.

All timestamps are generated, stored and serialized as UTC. SQLite hands
back naive datetimes, so anything read from the database goes through
ensure_utc before it is compared or serialized.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current time as a timezone-aware UTC datetime.

    Used as the column default for every timestamp in the schema.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize a datetime to timezone-aware UTC.

    Naive values are assumed to already be UTC.

    Example:
        >>> ensure_utc(datetime(2026, 1, 2, 3, 4)).tzinfo
        datetime.timezone.utc
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def to_iso_utc(dt: datetime | None) -> str | None:
    """
    Serialize a datetime as ISO 8601 with a 'Z' suffix.

    Example:
        >>> to_iso_utc(datetime(2026, 1, 2, 3, 4, tzinfo=timezone.utc))
        '2026-01-02T03:04:00Z'
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat().replace("+00:00", "Z")
