"""Live tracking of currently open ports."""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass
from datetime import datetime

from portwatch.scanner import Port


@dataclass
class State:
    """The known state of one open port."""

    port: Port
    open_since: datetime
    last_seen: datetime
    open_count: int = 1


def _key(port: Port) -> str:
    return f"{port.protocol}:{port}"


class Tracker:
    """A thread-safe map of currently open ports."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._states: dict[str, State] = {}

    def open(self, port: Port, now: datetime) -> None:
        """Record ``port`` as open; refresh its last-seen time if already tracked."""
        with self._lock:
            state = self._states.get(_key(port))
            if state is not None:
                state.last_seen = now
                return
            self._states[_key(port)] = State(port, now, now, 1)

    def close(self, port: Port) -> None:
        """Stop tracking ``port``."""
        with self._lock:
            self._states.pop(_key(port), None)

    def get(self, port: Port) -> State | None:
        """A copy of the state of ``port``, or None when it is not tracked."""
        with self._lock:
            state = self._states.get(_key(port))
            return dataclasses.replace(state) if state is not None else None

    def all(self) -> list[State]:
        """Copies of all tracked states."""
        with self._lock:
            return [dataclasses.replace(s) for s in self._states.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)