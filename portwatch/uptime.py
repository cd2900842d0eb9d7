"""How long each port has been continuously open, persisted as JSON."""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path


def _format_time(moment: datetime) -> str:
    text = moment.isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _parse_time(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class Record:
    """First and last sighting of a continuously open port."""

    protocol: str
    port: int
    first_seen: datetime
    last_seen: datetime

    def duration(self) -> timedelta:
        """How long the port has been open."""
        return self.last_seen - self.first_seen

    def _to_json(self) -> dict:
        return {
            "protocol": self.protocol,
            "port": self.port,
            "first_seen": _format_time(self.first_seen),
            "last_seen": _format_time(self.last_seen),
        }

    @classmethod
    def _from_json(cls, data: dict) -> Record:
        return cls(
            protocol=data["protocol"],
            port=int(data["port"]),
            first_seen=_parse_time(data["first_seen"]),
            last_seen=_parse_time(data["last_seen"]),
        )


class Tracker:
    """Uptime records for open ports, loaded from and saved to ``path``."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._records: dict[tuple[str, int], Record] = {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        stored = json.loads(text) or []
        if not isinstance(stored, list):
            raise ValueError("uptime: expected a JSON array")
        for item in stored:
            record = Record._from_json(item)
            self._records[(record.protocol, record.port)] = record

    def opened(self, protocol: str, port: int, at: datetime) -> None:
        """Register ``port`` as open at ``at`` unless it is already tracked."""
        if not 0 <= port <= 65535:
            raise ValueError(f"port {port} out of range 0-65535")
        with self._lock:
            self._records.setdefault((protocol, port), Record(protocol, port, at, at))

    def seen(self, protocol: str, port: int, at: datetime) -> None:
        """Update the last-seen time of a tracked port."""
        with self._lock:
            record = self._records.get((protocol, port))
            if record is not None:
                record.last_seen = at

    def closed(self, protocol: str, port: int) -> None:
        """Stop tracking ``port``."""
        with self._lock:
            self._records.pop((protocol, port), None)

    def get(self, protocol: str, port: int) -> Record | None:
        """The record for ``port``, or None when it is not tracked."""
        with self._lock:
            return self._records.get((protocol, port))

    def save(self) -> None:
        """Write all records to the tracker's path."""
        with self._lock:
            stored = [r._to_json() for r in self._records.values()]
        self.path.write_text(json.dumps(stored, indent=2), encoding="utf-8")