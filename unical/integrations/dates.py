"""
Date helpers shared by the connectors.

Handles RFC 3339 formatting/parsing and clamping of requested time windows
to the range a backend supports.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.parser import parse as parse_datetime_string

from unical.exceptions import ValidationError

# Supported window for event queries, relative to today
MAX_DAYS_IN_PAST = 42
MAX_DAYS_IN_FUTURE = 201


def _zone(time_zone: Optional[str]) -> tzinfo:
    """Resolve an IANA timezone name, UTC when absent."""
    if not time_zone:
        return timezone.utc
    try:
        return ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown time zone: {time_zone}", original_error=e)


def localize(dt: datetime, time_zone: Optional[str] = None) -> datetime:
    """
    Attach a timezone to a naive datetime.

    Args:
        dt: Datetime to localize
        time_zone: IANA timezone used for naive values (UTC when absent)

    Returns:
        Timezone-aware datetime

    Raises:
        ValidationError: If the timezone name is unknown
    """
    if dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=_zone(time_zone))


def window_bounds(
    time_zone: Optional[str] = None,
    now: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """
    Earliest and latest instants an event query may cover.

    The start of the day 42 days back and the end of the day 201 days
    ahead, with days taken in ``time_zone`` (UTC when absent).

    Raises:
        ValidationError: If the timezone name is unknown
    """
    zone = _zone(time_zone)
    today = (now or datetime.now(timezone.utc)).astimezone(zone).date()
    earliest = datetime.combine(today - timedelta(days=MAX_DAYS_IN_PAST), time.min, tzinfo=zone)
    latest = datetime.combine(today + timedelta(days=MAX_DAYS_IN_FUTURE), time.max, tzinfo=zone)
    return earliest, latest


def _clamp(
    requested: Optional[datetime],
    default: datetime,
    time_zone: Optional[str],
    bounds: tuple[datetime, datetime],
) -> datetime:
    if requested is None:
        return default
    earliest, latest = bounds
    value = localize(requested, time_zone).astimezone(earliest.tzinfo)
    return min(max(earliest, value), latest)


def window_start(
    requested: Optional[datetime],
    time_zone: Optional[str] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """
    Clamp a 'from' bound into the supported window.

    Missing values become the start of the window; out-of-range values are
    silently narrowed to the nearest end of it.
    """
    bounds = window_bounds(time_zone, now)
    return _clamp(requested, bounds[0], time_zone, bounds)


def window_end(
    requested: Optional[datetime],
    time_zone: Optional[str] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """
    Clamp a 'to' bound into the supported window.

    Missing values become the end of the window; out-of-range values are
    silently narrowed to the nearest end of it.
    """
    bounds = window_bounds(time_zone, now)
    return _clamp(requested, bounds[1], time_zone, bounds)


def query_window(
    from_date: Optional[datetime],
    to_date: Optional[datetime],
    time_zone: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[tuple[datetime, datetime]]:
    """
    Clamp both bounds of an event query.

    Returns:
        (start, end) in ``time_zone``, or None when nothing of the requested
        window lies inside the supported one
    """
    now = now or datetime.now(timezone.utc)
    start = window_start(from_date, time_zone, now)
    end = window_end(to_date, time_zone, now)
    if start >= end:
        return None
    return start, end


def format_rfc3339(dt: datetime) -> str:
    """Format datetime to RFC 3339, treating naive values as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def parse_timestamp(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """
    Parse an upstream timestamp or date.

    Date-only values (all-day events) become midnight UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    else:
        dt = parse_datetime_string(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def clamp_max_results(value: Optional[int], ceiling: int) -> int:
    """Clamp a page size to ``[1, ceiling]``; missing values use the ceiling."""
    if value is None:
        return ceiling
    return max(1, min(value, ceiling))
