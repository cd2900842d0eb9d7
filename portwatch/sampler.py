"""Periodic collection of timestamped port snapshots."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Iterable, Iterator

from portwatch.scanner import Port

ScanFunc = Callable[[], Iterable[Port]]


@dataclass
class Sample:
    """A port snapshot taken at a point in time."""

    time: datetime
    ports: list[Port] = field(default_factory=list)


class Sampler:
    """Calls a scan function every ``interval`` seconds and yields the results."""

    def __init__(self, scan: ScanFunc, interval: timedelta | float) -> None:
        if isinstance(interval, timedelta):
            interval = interval.total_seconds()
        if interval <= 0:
            raise ValueError("sampler: interval must be positive")
        self.scan = scan
        self.interval = float(interval)

    def run(self, stop: threading.Event | None = None) -> Iterator[Sample]:
        """Yield a sample per tick until ``stop`` is set; failed scans are skipped."""
        stop = stop or threading.Event()
        next_tick = time.monotonic() + self.interval
        while True:
            if stop.wait(max(0.0, next_tick - time.monotonic())):
                return
            at = datetime.now()
            next_tick += self.interval
            now = time.monotonic()
            if next_tick <= now:
                next_tick = now + self.interval
            try:
                ports = list(self.scan())
            except Exception:
                continue
            if stop.is_set():
                return
            yield Sample(time=at, ports=ports)


def pipeline(
    scan: ScanFunc,
    interval: timedelta | float,
    stop: threading.Event | None = None,
) -> Iterator[Sample]:
    """A stream of samples from ``scan`` taken every ``interval`` until ``stop`` is set."""
    return Sampler(scan, interval).run(stop)