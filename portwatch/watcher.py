"""Continuous polling of open ports, emitting opened and closed events."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator

from portwatch.scanner import Port, Scanner


def _seconds(value: timedelta | float) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


def _key(port: Port) -> str:
    return f"{port.protocol}:{port}"


@dataclass(frozen=True)
class WatchEvent:
    """A change observed during a watch cycle; ``state`` is "opened" or "closed"."""

    port: Port
    state: str
    observed_at: datetime


class Watcher:
    """Scans every ``interval`` seconds and reports ports that appeared or vanished."""

    def __init__(self, scanner: Scanner, interval: timedelta | float) -> None:
        self.scanner = scanner
        self.interval = _seconds(interval)
        if self.interval <= 0:
            raise ValueError("watcher: interval must be positive")
        self._lock = threading.Lock()
        self._prev: dict[str, Port] = {}

    def watch(self, stop: threading.Event | None = None) -> Iterator[WatchEvent]:
        """Yield change events after each interval until ``stop`` is set."""
        stop = stop or threading.Event()
        while not stop.wait(self.interval):
            yield from self._tick()

    def _tick(self) -> list[WatchEvent]:
        try:
            ports = self.scanner.scan()
        except (OSError, ValueError):
            return []
        with self._lock:
            current = {_key(p): p for p in ports}
            events = [
                WatchEvent(p, "opened", datetime.now())
                for k, p in current.items()
                if k not in self._prev
            ]
            events.extend(
                WatchEvent(p, "closed", datetime.now())
                for k, p in self._prev.items()
                if k not in current
            )
            self._prev = current
        return events


@dataclass
class PipelineConfig:
    """Options for :func:`new_pipeline`; ``interval`` is in seconds."""

    interval: float = 5.0


def new_pipeline(
    scanner: Scanner,
    config: PipelineConfig | None = None,
    stop: threading.Event | None = None,
) -> Iterator[WatchEvent]:
    """A stream of watch events from ``scanner`` polled at the configured interval."""
    config = config or PipelineConfig()
    return Watcher(scanner, config.interval).watch(stop)