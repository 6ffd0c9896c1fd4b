"""Time sources for deadline checks (unix seconds)."""

import time


class SystemClock:
    """Wall clock."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000):
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move forward and return the new time."""
        if seconds < 0:
            raise ValueError("Clock cannot go backwards")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        self._now = timestamp
