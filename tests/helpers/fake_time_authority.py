"""FakeTimeAuthority - controllable clock for deterministic tests.

Daily dispute limits are windowed on the UTC calendar date, so most
entitlement tests freeze the clock, use up a quota, then move to the next
day with ``advance(days=1)``.

Usage:
    >>> fake_time = FakeTimeAuthority(frozen_at=datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc))
    >>> fake_time.advance(hours=15)
    >>> fake_time.now().date()
    datetime.date(2026, 3, 11)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from arbiter.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FROZEN_AT = datetime(2026, 3, 10, 10, 0, 0, tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Time authority that only moves when a test moves it."""

    def __init__(self, frozen_at: datetime | None = None) -> None:
        """Initialize the fake clock.

        Args:
            frozen_at: Starting time. Defaults to 2026-03-10T10:00:00Z.
                Naive datetimes are taken as UTC.
        """
        self._current_time = self._aware(frozen_at or DEFAULT_FROZEN_AT)
        self._monotonic = 0.0

    @staticmethod
    def _aware(dt: datetime) -> datetime:
        return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)

    def now(self) -> datetime:
        """Return the controlled current time."""
        return self._current_time

    def utcnow(self) -> datetime:
        """Return the controlled current time (UTC)."""
        return self._current_time

    def monotonic(self) -> float:
        """Return seconds advanced since creation."""
        return self._monotonic

    # Test control

    def advance(
        self,
        seconds: float = 0,
        *,
        minutes: float = 0,
        hours: float = 0,
        days: float = 0,
    ) -> None:
        """Move time forward.

        Raises:
            ValueError: If the total step is negative.
        """
        step = timedelta(seconds=seconds, minutes=minutes, hours=hours, days=days)
        if step < timedelta(0):
            raise ValueError("Cannot advance time backwards; use set_time()")
        self._current_time += step
        self._monotonic += step.total_seconds()

    def set_time(self, dt: datetime) -> None:
        """Jump to an explicit time (monotonic clock unchanged)."""
        self._current_time = self._aware(dt)

    def __repr__(self) -> str:
        return f"FakeTimeAuthority(current_time={self._current_time.isoformat()})"
