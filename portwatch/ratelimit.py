"""Suppression of repeated alerts for the same key within a cooldown."""

from __future__ import annotations

import threading
import time
from datetime import timedelta


class Limiter:
    """Allows an event per key at most once per cooldown period."""

    def __init__(self, cooldown: timedelta | float) -> None:
        if isinstance(cooldown, timedelta):
            cooldown = cooldown.total_seconds()
        self.cooldown = float(cooldown)
        self._lock = threading.Lock()
        self._last: dict[str, float] = {}

    def allow(self, key: str) -> bool:
        """Whether an event for ``key`` should be forwarded now."""
        with self._lock:
            now = time.monotonic()
            last = self._last.get(key)
            if last is not None and now - last < self.cooldown:
                return False
            self._last[key] = now
            return True

    def reset(self, key: str) -> None:
        """Forget ``key`` so its next event passes immediately."""
        with self._lock:
            self._last.pop(key, None)

    def flush(self) -> None:
        """Forget every key."""
        with self._lock:
            self._last = {}