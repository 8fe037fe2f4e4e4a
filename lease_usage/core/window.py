"""
Day window arithmetic.

Usage records are indexed by the epoch second at which their billing day
starts (UTC). Range queries walk that index one day at a time.
"""

from datetime import date, datetime, timezone
from typing import Iterator, Union

SECONDS_PER_DAY = 86400


def align_to_day(timestamp: int) -> int:
    """Truncate an epoch timestamp to the start of its UTC day."""
    return timestamp - (timestamp % SECONDS_PER_DAY)


def day_values(start_date: int, days: int) -> Iterator[int]:
    """Yield the per-day query values of a window.

    The first value is ``start_date`` itself and each following value is
    exactly one day after the previous one, so the window covers
    ``[start_date, start_date + (days - 1) * SECONDS_PER_DAY]``.
    A window of zero or negative length yields nothing.

    Args:
        start_date: Epoch second of the first day
        days: Number of days in the window

    Yields:
        Epoch second for each day of the window, in order
    """
    value = start_date
    for _ in range(days):
        yield value
        value += SECONDS_PER_DAY


def parse_start_date(value: Union[str, int]) -> int:
    """Parse a CLI start date into a day-aligned epoch second.

    Accepts either epoch seconds or an ISO ``YYYY-MM-DD`` date (UTC).

    Raises:
        ValueError: If the value is neither form or is negative
    """
    if isinstance(value, int):
        timestamp = value
    else:
        text = value.strip()
        if text.isdigit():
            timestamp = int(text)
        else:
            try:
                day = date.fromisoformat(text)
            except ValueError:
                raise ValueError(
                    f"start date must be epoch seconds or YYYY-MM-DD, got {value!r}"
                )
            midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
            timestamp = int(midnight.timestamp())

    if timestamp < 0:
        raise ValueError("start date cannot be before the epoch")
    return align_to_day(timestamp)


def format_epoch(timestamp: int) -> str:
    """Render an epoch second as an ISO UTC timestamp for display."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
