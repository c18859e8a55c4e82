"""Canonical clock and slot normalization.

All instants handled by the scheduling core are timezone-aware UTC datetimes.
A slot is the start of the hour containing an instant.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone


def to_utc(instant: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def normalize_to_hour_start(instant: datetime) -> datetime:
    """Truncate an instant to the start of its (UTC) hour."""
    return to_utc(instant).replace(minute=0, second=0, microsecond=0)


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as an aware UTC datetime."""

    def normalize_to_hour_start(self, instant: datetime) -> datetime:
        return normalize_to_hour_start(instant)


class SystemClock(Clock):
    """Wall clock. Read on every call."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
