"""Health monitoring of the scan loop through heartbeats."""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable

from portwatch.scanner import Port

_POLL = 0.01

log = logging.getLogger(__name__)

ScanFunc = Callable[[], Iterable[Port]]


def _seconds(value: timedelta | float) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


@dataclass
class HealthStatus:
    """A snapshot of the scan loop's health."""

    last_scan: datetime | None = None
    scan_count: int = 0
    healthy: bool = False


class Watchdog:
    """Expects a heartbeat at least every ``timeout`` seconds, checked every ``interval``."""

    def __init__(self, scanner: Any, interval: timedelta | float, timeout: timedelta | float) -> None:
        self.scanner = scanner
        self.interval = _seconds(interval)
        self.timeout = _seconds(timeout)
        if self.interval <= 0:
            raise ValueError("watchdog: interval must be positive")
        self._lock = threading.Lock()
        self._status = HealthStatus()
        self._last_beat: float | None = None
        self._heartbeat = threading.Event()

    def beat(self) -> None:
        """Record that a scan cycle completed."""
        with self._lock:
            self._status.last_scan = datetime.now().astimezone()
            self._status.scan_count += 1
            self._last_beat = time.monotonic()
        self._heartbeat.set()

    def status(self) -> HealthStatus:
        """A copy of the current health status."""
        with self._lock:
            return replace(self._status)

    def watch(self, stop: threading.Event | None = None) -> None:
        """Check heartbeats until ``stop`` is set, logging a warning when they go stale."""
        stop = stop or threading.Event()
        next_tick = time.monotonic() + self.interval
        while not stop.is_set():
            remaining = next_tick - time.monotonic()
            if remaining <= 0:
                next_tick += self.interval
                now = time.monotonic()
                if next_tick <= now:
                    next_tick = now + self.interval
                self._check()
                continue
            if self._heartbeat.wait(min(remaining, _POLL)):
                self._heartbeat.clear()
                with self._lock:
                    self._status.healthy = True

    def _check(self) -> None:
        with self._lock:
            if self._last_beat is None:
                return
            stale = time.monotonic() - self._last_beat
            if stale <= self.timeout:
                self._status.healthy = True
                return
            self._status.healthy = False
            last = self._status.last_scan
        log.warning(
            "[watchdog] WARNING: no scan heartbeat for %ds (last: %s)",
            round(stale),
            last.isoformat(timespec="seconds"),
        )


class ScanLoop:
    """Runs ``scan`` repeatedly, beating the watchdog and queueing each result."""

    def __init__(self, scan: ScanFunc, watchdog: Watchdog, out: queue.Queue) -> None:
        self.scan = scan
        self.watchdog = watchdog
        self.out = out

    def run(self, stop: threading.Event | None = None) -> None:
        """Scan until ``stop`` is set; failed scans are retried without a heartbeat."""
        stop = stop or threading.Event()
        while not stop.is_set():
            try:
                ports = list(self.scan())
            except Exception:
                if stop.is_set():
                    return
                continue
            self.watchdog.beat()
            while True:
                try:
                    self.out.put(ports, timeout=_POLL)
                    break
                except queue.Full:
                    if stop.is_set():
                        return