"""Day-granularity date helpers shared by the timeline and workload analyzers."""

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Union

DateLike = Union[date, datetime]


class TimeWindowError(ValueError):
    """Exception raised when a date does not follow the normalization contract."""

    pass


def to_day(value: Optional[DateLike]) -> Optional[date]:
    """
    Normalize a date or datetime to its calendar day.

    Time of day is dropped. ``None`` passes through unchanged.

    Raises:
        TimeWindowError: If the value is neither a date nor a datetime
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TimeWindowError(
        f"Expected a date or datetime, got {type(value).__name__}"
    )


def ensure_normalized(value: DateLike) -> date:
    """
    Check that a requested date is already normalized to midnight.

    A plain ``date`` is always accepted. A ``datetime`` is accepted only
    when it is naive and exactly at midnight; the engine does not perform
    timezone conversion.

    Args:
        value: The requested date

    Returns:
        date: The calendar day

    Raises:
        TimeWindowError: For aware or non-midnight datetimes and non-date values
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            raise TimeWindowError(
                f"Date {value.isoformat()} carries a timezone; "
                "dates must arrive normalized to local midnight"
            )
        if value.time() != time.min:
            raise TimeWindowError(
                f"Date {value.isoformat()} is not normalized to midnight"
            )
        return value.date()
    if isinstance(value, date):
        return value
    raise TimeWindowError(
        f"Expected a date or datetime, got {type(value).__name__}"
    )


def days_between(start: DateLike, end: DateLike) -> int:
    """Signed number of whole days from ``start`` to ``end``."""
    return (to_day(end) - to_day(start)).days


def inclusive_day_span(start: DateLike, end: DateLike) -> int:
    """
    Number of calendar days covered by ``[start, end]``, both ends included.

    An inverted window yields a value below 1; callers decide how to clamp it.
    """
    return days_between(start, end) + 1


def contains(start: DateLike, end: DateLike, day: DateLike) -> bool:
    """Check whether ``day`` falls within the inclusive window ``[start, end]``."""
    day = to_day(day)
    return to_day(start) <= day <= to_day(end)


def overlaps(
    a_start: DateLike, a_end: DateLike, b_start: DateLike, b_end: DateLike
) -> bool:
    """Check whether two inclusive windows share at least one day."""
    return to_day(a_start) <= to_day(b_end) and to_day(b_start) <= to_day(a_end)


def is_in_past(day: DateLike, now: DateLike) -> bool:
    """Check whether ``day`` is strictly before ``now`` at day granularity."""
    return to_day(day) < to_day(now)


def add_days(day: DateLike, days: int) -> date:
    return to_day(day) + timedelta(days=days)


def date_range(start: DateLike, end: DateLike) -> Iterator[date]:
    """
    Iterate over every day in ``[start, end]``.

    Yields nothing when ``end`` is before ``start``.
    """
    current = to_day(start)
    last = to_day(end)
    while current <= last:
        yield current
        current += timedelta(days=1)
