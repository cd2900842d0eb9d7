"""Plain-text table of monitored ports."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import TextIO

from portwatch.scanner import Port

_RULE = "-" * 40


@dataclass
class Row:
    """One port row in the table."""

    port: Port
    status: str
    seen_at: datetime


def _key(port: Port) -> str:
    return f"{port.protocol}/{port.number}"


class Table:
    """Current state of monitored ports for display."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: dict[str, Row] = {}

    def upsert(self, port: Port, status: str) -> None:
        """Add or update a port row."""
        with self._lock:
            self._rows[_key(port)] = Row(port, status, datetime.now())

    def remove(self, port: Port) -> None:
        """Delete a port row if present."""
        with self._lock:
            self._rows.pop(_key(port), None)

    def render(self, out: TextIO) -> None:
        """Write the formatted table to ``out``."""
        with self._lock:
            rows = list(self._rows.values())
        lines = [_RULE, f"{'PROTO':<8} {'PORT':<6} {'STATUS':<10} SEEN", _RULE]
        lines.extend(
            f"{r.port.protocol:<8} {r.port.number:<6} {r.status:<10} {r.seen_at:%H:%M:%S}"
            for r in rows
        )
        lines.append(_RULE)
        out.write("\n".join(lines) + "\n")

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)