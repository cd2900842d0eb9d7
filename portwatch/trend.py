"""Direction of the open-port count over recent scans."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, Sequence, TextIO

from portwatch.scanner import Port

_PADDING = 2


class Direction(enum.Enum):
    """Whether port activity is rising, falling or stable."""

    STABLE = "stable"
    RISING = "rising"
    FALLING = "falling"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Sample:
    """An open-port count at a point in time."""

    at: datetime
    count: int


@dataclass(frozen=True)
class Event:
    """The trend after one scan cycle."""

    open_count: int
    direction: Direction


class Tracker:
    """Keeps the last ``window`` counts and derives a direction from them."""

    def __init__(self, window: int = 2) -> None:
        self.window = max(window, 2)
        self._lock = threading.Lock()
        self._samples: list[Sample] = []

    def record(self, count: int) -> None:
        """Add a sample taken now, dropping the oldest beyond the window."""
        with self._lock:
            self._samples.append(Sample(datetime.now().astimezone(), count))
            del self._samples[: -self.window]

    def direction(self) -> Direction:
        """Compare the first and last kept samples."""
        with self._lock:
            if len(self._samples) < 2:
                return Direction.STABLE
            first, last = self._samples[0].count, self._samples[-1].count
        if last > first:
            return Direction.RISING
        if last < first:
            return Direction.FALLING
        return Direction.STABLE

    def samples(self) -> list[Sample]:
        """A copy of the kept samples, oldest first."""
        with self._lock:
            return list(self._samples)


def pipeline(
    tracker: Tracker,
    batches: Iterable[Sequence[Port]],
    stop=None,
) -> Iterator[Event]:
    """Record each batch's size and yield the resulting trend until input ends or ``stop`` is set."""
    for batch in batches:
        if stop is not None and stop.is_set():
            return
        count = len(batch)
        tracker.record(count)
        yield Event(open_count=count, direction=tracker.direction())


def _rfc3339(moment: datetime) -> str:
    text = moment.isoformat(timespec="seconds")
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def print_samples(out: TextIO, samples: Iterable[Sample]) -> None:
    """Write an aligned table of samples to ``out``."""
    rows = [("TIME", "OPEN PORTS")]
    rows.extend((_rfc3339(s.at), str(s.count)) for s in samples)
    width = max(len(first) for first, _ in rows) + _PADDING
    out.write("".join(f"{first:<{width}}{second}\n" for first, second in rows))


def summary(tracker: Tracker) -> str:
    """One line with the latest count, the trend and the number of samples."""
    samples = tracker.samples()
    if not samples:
        return "no data"
    return (
        f"open ports: {samples[-1].count}  trend: {tracker.direction()}  "
        f"(samples: {len(samples)})"
    )