from datetime import datetime, timezone, tzinfo
from typing import Optional

from tzlocal import get_localzone


def local_zone() -> tzinfo:
    """The host's IANA zone, so day arithmetic follows its DST rules."""
    return get_localzone()


def get_time(tz: Optional[tzinfo] = None) -> datetime:
    """
    Get the current time as an aware datetime.

    Args:
        tz (Optional[tzinfo]): Zone to express the time in. Defaults to the
            host's IANA zone from local_zone().

    Returns:
        datetime: The current time.

    Example:
        >>> get_time().tzinfo is not None
        True
    """
    return datetime.now(tz if tz is not None else local_zone())


def to_storage_time(value: datetime) -> datetime:
    """
    Convert a datetime to the naive UTC form stored in the database.

    Naive input is interpreted as local time.

    Example:
        >>> to_storage_time(datetime(2024, 1, 1, 12, tzinfo=timezone.utc))
        datetime.datetime(2024, 1, 1, 12, 0)
    """
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage_time(value: datetime) -> datetime:
    """
    Attach UTC to a naive datetime read from the database.

    Example:
        >>> from_storage_time(datetime(2024, 1, 1, 12)).isoformat()
        '2024-01-01T12:00:00+00:00'
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
