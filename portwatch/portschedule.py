"""Scheduled scan windows and filtering of ports against them."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Iterator, Sequence, TextIO

from portwatch.scanner import Port


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _rfc3339(moment: datetime) -> str:
    text = moment.isoformat(timespec="seconds")
    return text[:-6] + "Z" if text.endswith("+00:00") else text


@dataclass
class Entry:
    """A scheduled scan window for a port range."""

    label: str
    start: datetime
    end: datetime
    port_low: int
    port_high: int
    protocol: str = ""

    def active(self, now: datetime) -> bool:
        """Whether ``now`` lies within [start, end)."""
        return self.start <= now < self.end

    def _matches(self, port: Port) -> bool:
        proto_ok = not self.protocol or self.protocol == port.protocol
        return proto_ok and self.port_low <= port.number <= self.port_high


class Schedule:
    """A thread-safe collection of scan windows."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[Entry] = []

    def add(self, entry: Entry) -> None:
        """Insert a new window."""
        with self._lock:
            self._entries.append(entry)

    def remove(self, label: str) -> None:
        """Delete every window with the given label."""
        with self._lock:
            self._entries = [e for e in self._entries if e.label != label]

    def active_now(self, now: datetime) -> list[Entry]:
        """All windows active at ``now``."""
        with self._lock:
            return [e for e in self._entries if e.active(now)]

    def all(self) -> list[Entry]:
        """A copy of all windows."""
        with self._lock:
            return list(self._entries)


class Gate:
    """Filters ports down to those within an active scheduled window."""

    def __init__(self, schedule: Schedule, clock: Callable[[], datetime] = _utc_now) -> None:
        self.schedule = schedule
        self.clock = clock

    def filter(self, ports: Iterable[Port]) -> list[Port]:
        """Ports matching an active window; all ports when none is active."""
        active = self.schedule.active_now(self.clock())
        if not active:
            return list(ports)
        return [p for p in ports if any(e._matches(p) for e in active)]


def pipeline(
    gate: Gate,
    batches: Iterable[Sequence[Port]],
    stop: threading.Event | None = None,
) -> Iterator[list[Port]]:
    """Yield each batch filtered through ``gate`` until input ends or ``stop`` is set."""
    for batch in batches:
        if stop is not None and stop.is_set():
            return
        yield gate.filter(batch)


def print_schedule(out: TextIO, schedule: Schedule) -> None:
    """Write a table of all windows to ``out``."""
    entries = schedule.all()
    if not entries:
        out.write("no scheduled windows defined\n")
        return
    now = _utc_now()
    out.write(f"{'LABEL':<20} {'PROTO':<8} {'LOW':>6}-{'HIGH':>6} {'STATUS':<8} WINDOW\n")
    for e in entries:
        status = "active" if e.active(now) else "inactive"
        out.write(
            f"{e.label:<20} {e.protocol:<8} {e.port_low:>6}-{e.port_high:>6} {status:<8} "
            f"{_rfc3339(e.start)} -> {_rfc3339(e.end)}\n"
        )


def summary(schedule: Schedule) -> str:
    """One line stating how many windows are active out of the total."""
    total = len(schedule.all())
    active = len(schedule.active_now(_utc_now()))
    return f"{active}/{total} schedule windows active"