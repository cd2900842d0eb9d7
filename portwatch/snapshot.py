"""Persisted snapshots of open ports and their retention."""

from __future__ import annotations

import contextlib
import json
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Sequence

from portwatch.scanner import Port

_LATEST = "latest.json"


@dataclass
class Snapshot:
    """A recorded set of open ports at a point in time."""

    timestamp: datetime
    ports: list[Port] = field(default_factory=list)


def save(path: str | os.PathLike, ports: Iterable[Port]) -> None:
    """Write a snapshot of ``ports`` stamped with the current UTC time."""
    data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "ports": [asdict(p) for p in ports],
    }
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")


def load(path: str | os.PathLike) -> Snapshot:
    """Read a snapshot; raises OSError or ValueError on failure."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("snapshot: expected a JSON object")
    ports = [Port(**p) for p in data.get("ports") or []]
    return Snapshot(timestamp=datetime.fromisoformat(data["timestamp"]), ports=ports)


def diff(previous: Sequence[Port], current: Sequence[Port]) -> tuple[list[Port], list[Port]]:
    """Return (opened, closed) ports between two port lists."""
    prev_set = {str(p) for p in previous}
    curr_set = {str(p) for p in current}
    opened = [p for p in current if str(p) not in prev_set]
    closed = [p for p in previous if str(p) not in curr_set]
    return opened, closed


class Manager:
    """Snapshot storage in a directory with optional day-based retention."""

    def __init__(self, directory: str | os.PathLike, retain_days: int = 0) -> None:
        self.directory = Path(directory)
        self.retain_days = retain_days
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OSError(f"snapshot: create dir {self.directory}: {exc}") from exc

    def latest_path(self) -> Path:
        """Path of the canonical latest snapshot."""
        return self.directory / _LATEST

    def archive_path(self) -> Path:
        """A timestamped archive path for the current moment."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        return self.directory / f"snapshot_{stamp}.json"

    def prune(self) -> None:
        """Remove archive files older than the retention period; 0 keeps all."""
        if self.retain_days == 0:
            return
        cutoff = (datetime.now(timezone.utc) - timedelta(days=self.retain_days)).timestamp()
        with os.scandir(self.directory) as entries:
            for entry in entries:
                if entry.name == _LATEST:
                    continue
                try:
                    mtime = entry.stat().st_mtime
                except OSError:
                    continue
                if mtime < cutoff:
                    with contextlib.suppress(OSError):
                        os.remove(entry.path)