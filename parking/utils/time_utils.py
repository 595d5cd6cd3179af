from math import ceil, floor

from services.domain import DurationBreakdown
from services.exceptions import InvalidDuration


def elapsed_seconds(start, end):
    seconds = (end - start).total_seconds()
    if seconds < 0:
        raise InvalidDuration(f"End time {end} is before start time {start}.")
    return seconds


def calculate_hours(start, end):
    """Whole hours billed for the interval, every partial hour rounded up."""
    return ceil(elapsed_seconds(start, end) / 3600)


def duration_minutes(start, end):
    return floor(elapsed_seconds(start, end) / 60)


def format_duration(start, end):
    total = int(elapsed_seconds(start, end))
    return DurationBreakdown(
        hours=total // 3600,
        minutes=(total % 3600) // 60,
        seconds=total % 60,
    )
