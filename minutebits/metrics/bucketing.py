"""Truncation of timestamps to integer bucket indexes.

Every bucket is identified by an integer so keys never depend on date
formatting. All arithmetic is in UTC; naive datetimes are taken as UTC and
numbers as epoch seconds.
"""

from datetime import date, datetime, timedelta, timezone
from math import floor
from typing import Union

from minutebits.domain.models import Granularity

Timestamp = Union[datetime, date, int, float]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# 1970-01-01 was a Thursday; shifting by 3 days puts week boundaries on Mondays
_WEEK_OFFSET_DAYS = 3

_SECONDS = {
    Granularity.HOUR: 3600,
    Granularity.MINUTE: 60,
}


def to_utc(timestamp: Timestamp | None = None) -> datetime:
    """Normalise ``timestamp`` to an aware UTC datetime (now when None)."""
    if timestamp is None:
        return datetime.now(timezone.utc)
    if isinstance(timestamp, bool):
        raise TypeError("timestamp must be a datetime, date or epoch seconds")
    if isinstance(timestamp, (int, float)):
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp.astimezone(timezone.utc)
    if isinstance(timestamp, date):
        return datetime(
            timestamp.year, timestamp.month, timestamp.day, tzinfo=timezone.utc
        )
    raise TypeError(
        "timestamp must be a datetime, date or epoch seconds, "
        f"not {type(timestamp).__name__}"
    )


def bucket_start(timestamp_seconds: float, granularity_seconds: int) -> int:
    return int(floor(timestamp_seconds / granularity_seconds) * granularity_seconds)


def bucket_index(timestamp: Timestamp | None, granularity: Granularity) -> int:
    """Integer index of the bucket ``timestamp`` falls into."""
    moment = to_utc(timestamp)
    if granularity is Granularity.YEAR:
        return moment.year
    if granularity is Granularity.MONTH:
        return moment.year * 12 + (moment.month - 1)
    days = (moment.date() - EPOCH.date()).days
    if granularity is Granularity.DAY:
        return days
    if granularity is Granularity.WEEK:
        return (days + _WEEK_OFFSET_DAYS) // 7
    seconds = _SECONDS[granularity]
    epoch_seconds = (moment - EPOCH).total_seconds()
    return bucket_start(epoch_seconds, seconds) // seconds


def bucket_boundary(index: int, granularity: Granularity) -> datetime:
    """UTC start of the bucket with the given index."""
    if granularity is Granularity.YEAR:
        return datetime(index, 1, 1, tzinfo=timezone.utc)
    if granularity is Granularity.MONTH:
        year, month0 = divmod(index, 12)
        return datetime(year, month0 + 1, 1, tzinfo=timezone.utc)
    if granularity is Granularity.DAY:
        return EPOCH + timedelta(days=index)
    if granularity is Granularity.WEEK:
        return EPOCH + timedelta(days=index * 7 - _WEEK_OFFSET_DAYS)
    return EPOCH + timedelta(seconds=index * _SECONDS[granularity])
