"""System clock implementation of the time authority port."""

import time
from datetime import datetime, timezone

from arbiter.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Time authority backed by the system clock.

    Every timestamp is timezone-aware UTC, so calendar dates derived from
    it (the daily usage window) are UTC dates.
    """

    def now(self) -> datetime:
        """Return the current UTC time."""
        return datetime.now(timezone.utc)

    def utcnow(self) -> datetime:
        """Return the current UTC time."""
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        """Return the process monotonic clock."""
        return time.monotonic()
