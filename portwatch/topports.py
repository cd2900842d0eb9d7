"""Counting how often each port is observed open."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from portwatch.scanner import Port


@dataclass
class Entry:
    """A port and the number of times it has been observed open."""

    port: Port
    count: int = 0


def _key(port: Port) -> str:
    return f"{port.protocol}:{port}"


class Counter:
    """Tracks how many times each port has been seen open."""

    def __init__(self) -> None:
        self._counts: dict[str, Entry] = {}

    def record(self, ports: Iterable[Port]) -> None:
        """Increment the observation count of every port given."""
        for port in ports:
            entry = self._counts.setdefault(_key(port), Entry(port=port))
            entry.count += 1

    def top(self, n: int = 0) -> list[Entry]:
        """The ``n`` most observed ports, highest count first; all if n <= 0."""
        entries = sorted(
            (Entry(e.port, e.count) for e in self._counts.values()),
            key=lambda e: (-e.count, e.port.number),
        )
        if 0 < n < len(entries):
            return entries[:n]
        return entries

    def reset(self) -> None:
        """Clear all counts."""
        self._counts = {}