"""Time formatting utilities."""
from datetime import datetime, timezone

import pytz

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def to_local(dt: datetime, timezone_str: str) -> datetime:
    """Convert a datetime to the given timezone. Naive values are UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(pytz.timezone(timezone_str))


def format_slot(dt: datetime, timezone_str: str = "UTC") -> str:
    """Format a slot like 'day 01 of June, at 14:00h'."""
    local_dt = to_local(dt, timezone_str)
    return (
        f"day {local_dt.day:02d} of {MONTH_NAMES[local_dt.month - 1]}, "
        f"at {local_dt.hour}:{local_dt.minute:02d}h"
    )
