"""Thread-safe map of tracked ports keyed by protocol and number."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable

from portwatch.scanner import Port


def _key(port: Port) -> str:
    return f"{port.protocol}:{port.number}"


@dataclass
class Delta:
    """Ports opened or closed between two syncs."""

    opened: list[Port] = field(default_factory=list)
    closed: list[Port] = field(default_factory=list)


class PortMap:
    """Thread-safe lookup of tracked ports."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ports: dict[str, Port] = {}

    def set(self, port: Port) -> None:
        """Insert or update a port entry."""
        with self._lock:
            self._ports[_key(port)] = port

    def delete(self, port: Port) -> None:
        """Remove a port entry if present."""
        with self._lock:
            self._ports.pop(_key(port), None)

    def has(self, port: Port) -> bool:
        """Whether the port is currently tracked."""
        with self._lock:
            return _key(port) in self._ports

    def all(self) -> list[Port]:
        """A snapshot of all tracked ports."""
        with self._lock:
            return list(self._ports.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._ports)

    def sync(self, current: Iterable[Port]) -> Delta:
        """Make the map match ``current`` and report what changed."""
        current_set = {_key(p): p for p in current}
        delta = Delta()
        with self._lock:
            for k in [k for k in self._ports if k not in current_set]:
                delta.closed.append(self._ports.pop(k))
            for k, p in current_set.items():
                if k not in self._ports:
                    delta.opened.append(p)
                    self._ports[k] = p
        return delta