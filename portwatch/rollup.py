"""Batching of rapid port changes into one event after a quiet period."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from portwatch.scanner import Port

_POLL = 0.05


@dataclass
class Event:
    """A batched summary of port changes."""

    opened: list[Port] = field(default_factory=list)
    closed: list[Port] = field(default_factory=list)
    at: datetime = field(default_factory=datetime.now)


def _key(port: Port) -> str:
    return f"{port.protocol}:{port}"


class Rollup:
    """Collects open/close changes and emits them once no new change arrives for ``window``."""

    def __init__(self, window: timedelta | float) -> None:
        if isinstance(window, timedelta):
            window = window.total_seconds()
        self.window = float(window)
        self._lock = threading.Lock()
        self._opened: dict[str, Port] = {}
        self._closed: dict[str, Port] = {}
        self._timer: threading.Timer | None = None
        self._out: queue.Queue[Event] = queue.Queue(maxsize=8)
        self._shut = threading.Event()

    def add_opened(self, port: Port) -> None:
        """Record a newly opened port, cancelling a pending close of it."""
        with self._lock:
            k = _key(port)
            self._closed.pop(k, None)
            self._opened[k] = port
            self._reset_timer()

    def add_closed(self, port: Port) -> None:
        """Record a newly closed port, cancelling a pending open of it."""
        with self._lock:
            k = _key(port)
            self._opened.pop(k, None)
            self._closed[k] = port
            self._reset_timer()

    def get(self, timeout: float | None = None) -> Event | None:
        """The next batched event, or None on timeout or once closed and drained."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            wait = _POLL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                wait = min(wait, remaining)
            try:
                return self._out.get(timeout=wait)
            except queue.Empty:
                if self._shut.is_set():
                    return None

    def watch(
        self,
        handler: Callable[[Event], None],
        stop: threading.Event | None = None,
    ) -> None:
        """Pass each batched event to ``handler`` until ``stop`` is set or the rollup is closed."""
        while stop is None or not stop.is_set():
            try:
                event = self._out.get(timeout=_POLL)
            except queue.Empty:
                if self._shut.is_set():
                    return
                continue
            handler(event)

    def close(self) -> None:
        """Cancel any pending flush; no further events are produced."""
        with self._lock:
            self._shut.set()
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _reset_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        if self._shut.is_set():
            self._timer = None
            return
        timer = threading.Timer(self.window, self._flush)
        timer.daemon = True
        timer.start()
        self._timer = timer

    def _flush(self) -> None:
        with self._lock:
            if not self._opened and not self._closed:
                return
            event = Event(
                opened=list(self._opened.values()),
                closed=list(self._closed.values()),
                at=datetime.now(),
            )
            self._opened = {}
            self._closed = {}
        self._out.put(event)