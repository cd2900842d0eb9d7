"""Temporary suppression of alerts for specific ports, with JSON persistence."""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, TextIO


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _rfc3339(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_time(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class Entry:
    """A single suppression rule."""

    port: int
    protocol: str
    until: datetime


class SuppressList:
    """Active suppression rules keyed by port and protocol."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self.clock = clock or _utc_now
        self._lock = threading.Lock()
        self._entries: dict[tuple[int, str], datetime] = {}

    def add(self, port: int, protocol: str, until: datetime) -> None:
        """Suppress alerts for ``port``/``protocol`` until ``until``."""
        if not 0 <= port <= 65535:
            raise ValueError(f"port {port} out of range 0-65535")
        with self._lock:
            self._entries[(port, protocol)] = until

    def remove(self, port: int, protocol: str) -> None:
        """Drop a suppression immediately."""
        with self._lock:
            self._entries.pop((port, protocol), None)

    def is_suppressed(self, port: int, protocol: str) -> bool:
        """Whether alerts for ``port``/``protocol`` are currently suppressed."""
        with self._lock:
            until = self._entries.get((port, protocol))
            return until is not None and self.clock() < until

    def purge(self) -> None:
        """Remove every expired rule."""
        with self._lock:
            now = self.clock()
            self._entries = {k: u for k, u in self._entries.items() if now < u}

    def active(self) -> list[Entry]:
        """All rules that have not yet expired."""
        with self._lock:
            now = self.clock()
            return [Entry(p, proto, u) for (p, proto), u in self._entries.items() if now < u]

    def save(self, path: str | os.PathLike) -> None:
        """Write the active rules to ``path`` as JSON."""
        stored = [
            {"port": e.port, "protocol": e.protocol, "until": e.until.isoformat()}
            for e in self.active()
        ]
        Path(path).write_text(json.dumps(stored, indent=2), encoding="utf-8")

    def load(self, path: str | os.PathLike) -> None:
        """Add the unexpired rules stored at ``path``; a missing file is ignored."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        stored = json.loads(text)
        if not isinstance(stored, list):
            raise ValueError("suppress: expected a JSON array")
        now = self.clock()
        for item in stored:
            until = _parse_time(item["until"])
            if now < until:
                self.add(int(item["port"]), item["protocol"], until)


def add_window(
    path: str | os.PathLike,
    port: int,
    protocol: str,
    duration: timedelta | float,
    out: TextIO,
) -> None:
    """Suppress ``port``/``protocol`` for ``duration`` and persist the list at ``path``."""
    if not isinstance(duration, timedelta):
        duration = timedelta(seconds=duration)
    rules = SuppressList()
    rules.load(path)
    until = rules.clock() + duration
    rules.add(port, protocol, until)
    rules.save(path)
    out.write(f"suppressed {port}/{protocol} until {_rfc3339(until)}\n")


def list_windows(path: str | os.PathLike, out: TextIO) -> None:
    """Write every active suppression stored at ``path`` to ``out``."""
    rules = SuppressList()
    rules.load(path)
    active = rules.active()
    if not active:
        out.write("no active suppression windows\n")
        return
    for e in active:
        out.write(f"{e.port}/{e.protocol}\tuntil {_rfc3339(e.until)}\n")


def clear_expired(path: str | os.PathLike, out: TextIO) -> None:
    """Rewrite the list at ``path`` without expired rules."""
    rules = SuppressList()
    rules.load(path)
    rules.purge()
    rules.save(path)
    out.write("expired suppression windows cleared\n")