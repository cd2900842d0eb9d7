"""Ports seen active within a sliding time window."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable, Iterable, TextIO

from portwatch.scanner import Port


@dataclass
class Entry:
    """First and last sighting of a port within the window."""

    port: Port
    first_seen: datetime
    last_seen: datetime
    count: int = 1


def _key(port: Port) -> str:
    return f"{port.protocol}:{port.address}"


class Window:
    """Tracks port activity over a sliding duration."""

    def __init__(
        self,
        duration: timedelta | float,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not isinstance(duration, timedelta):
            duration = timedelta(seconds=duration)
        self.duration = duration
        self.clock = clock or datetime.now
        self._lock = threading.Lock()
        self._entries: dict[str, Entry] = {}

    def _evict(self) -> None:
        cutoff = self.clock() - self.duration
        for k in [k for k, e in self._entries.items() if e.last_seen < cutoff]:
            del self._entries[k]

    def record(self, port: Port) -> None:
        """Mark ``port`` as seen now."""
        with self._lock:
            self._evict()
            entry = self._entries.get(_key(port))
            if entry is not None:
                entry.last_seen = self.clock()
                entry.count += 1
                return
            now = self.clock()
            self._entries[_key(port)] = Entry(port, now, now, 1)

    def active(self) -> list[Entry]:
        """Copies of all entries seen within the window."""
        with self._lock:
            self._evict()
            return [replace(e) for e in self._entries.values()]

    def __len__(self) -> int:
        with self._lock:
            self._evict()
            return len(self._entries)


def print_active(out: TextIO, entries: Iterable[Entry] | None) -> None:
    """Write a table of window entries, ordered by protocol and address."""
    ordered = sorted(entries or (), key=lambda e: (e.port.protocol, e.port.address))
    if not ordered:
        out.write("no ports active in window\n")
        return
    out.write(f"{'PROTO':<8} {'ADDR':<22} {'FIRST':<10} {'LAST':<10} COUNT\n")
    out.write("-" * 64 + "\n")
    for e in ordered:
        out.write(
            f"{e.port.protocol:<8} {e.port.address:<22} "
            f"{e.first_seen:%H:%M:%S}   {e.last_seen:%H:%M:%S}   {e.count}\n"
        )


def summary(entries: Iterable[Entry] | None) -> str:
    """One line counting active ports and total observations."""
    items = list(entries or ())
    if not items:
        return "window: 0 active ports"
    total = sum(e.count for e in items)
    return f"window: {len(items)} active port(s), {total} total observations"