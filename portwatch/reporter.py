"""Writing port change events as text or JSON lines."""

from __future__ import annotations

import enum
import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import TextIO

from portwatch.scanner import Port


class Format(str, enum.Enum):
    """How reports are rendered."""

    TEXT = "text"
    JSON = "json"


@dataclass
class Event:
    """A port state change event."""

    timestamp: datetime
    kind: str
    port: Port

    def _to_json(self) -> str:
        stamp = self.timestamp.isoformat().replace("+00:00", "Z")
        return json.dumps(
            {"timestamp": stamp, "kind": self.kind, "port": asdict(self.port)},
            separators=(",", ":"),
        )


class Reporter:
    """Writes port change events to a text stream."""

    def __init__(self, out: TextIO, fmt: Format | str = Format.TEXT) -> None:
        self.out = out
        self.fmt = fmt

    def report_opened(self, port: Port) -> None:
        """Emit an event for a newly opened port."""
        self._emit(Event(datetime.now(timezone.utc), "opened", port))

    def report_closed(self, port: Port) -> None:
        """Emit an event for a recently closed port."""
        self._emit(Event(datetime.now(timezone.utc), "closed", port))

    def _emit(self, event: Event) -> None:
        if self.fmt == Format.JSON:
            self.out.write(event._to_json() + "\n")
            return
        symbol = "-" if event.kind == "closed" else "+"
        stamp = event.timestamp.strftime("%Y-%m-%dT%H:%M:%SZ")
        self.out.write(f"[{stamp}] {symbol} [{event.kind}] {event.port}\n")