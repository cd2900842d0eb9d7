"""Minimum spacing between successive scan cycles."""

from __future__ import annotations

import threading
import time
from datetime import timedelta
from typing import Callable


class Throttle:
    """Enforces at least ``min_gap`` seconds between allowed ticks.

    A gap of zero or less disables the throttle. ``clock`` returns seconds
    on a monotonic scale.
    """

    def __init__(
        self,
        min_gap: timedelta | float,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if isinstance(min_gap, timedelta):
            min_gap = min_gap.total_seconds()
        self.min_gap = float(min_gap)
        self.clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._last_tick: float | None = None

    def _ready(self, now: float) -> bool:
        return (
            self.min_gap <= 0
            or self._last_tick is None
            or now - self._last_tick >= self.min_gap
        )

    def allow(self) -> bool:
        """Whether a tick may run now; an allowed tick is recorded."""
        with self._lock:
            now = self.clock()
            if self._ready(now):
                self._last_tick = now
                return True
            return False

    def wait(self) -> None:
        """Block until a tick is allowed, then record it."""
        while True:
            with self._lock:
                now = self.clock()
                if self._ready(now):
                    self._last_tick = now
                    return
                remaining = self.min_gap - (now - self._last_tick)
            time.sleep(remaining)

    def reset(self) -> None:
        """Forget the last tick so the next one is allowed at once."""
        with self._lock:
            self._last_tick = None

    def remaining(self) -> float:
        """Seconds still to wait before the next tick; zero when allowed now."""
        with self._lock:
            if self.min_gap <= 0 or self._last_tick is None:
                return 0.0
            elapsed = self.clock() - self._last_tick
            if elapsed >= self.min_gap:
                return 0.0
            return self.min_gap - elapsed