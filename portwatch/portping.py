"""Reachability checks for ports on the local host."""

from __future__ import annotations

import socket
import threading
import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from portwatch.scanner import Port

_HOST = "127.0.0.1"
_DEFAULT_TIMEOUT = 2.0


@dataclass
class Result:
    """The outcome of a single ping attempt."""

    port: Port
    latency: float
    alive: bool
    error: Exception | None = None


def _socket_type(protocol: str) -> int:
    if protocol.startswith("tcp"):
        return socket.SOCK_STREAM
    if protocol.startswith("udp"):
        return socket.SOCK_DGRAM
    raise ValueError(f"unknown network {protocol!r}")


class Pinger:
    """Checks whether a local port is reachable by dialling it."""

    def __init__(self, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout if timeout > 0 else _DEFAULT_TIMEOUT

    def ping(self, port: Port) -> Result:
        """Connect to ``port`` on the local host and report the outcome."""
        start = time.perf_counter()
        try:
            sock_type = _socket_type(port.protocol)
            with socket.socket(socket.AF_INET, sock_type) as sock:
                sock.settimeout(self.timeout)
                sock.connect((_HOST, port.number))
        except (OSError, ValueError) as exc:
            return Result(port, time.perf_counter() - start, False, exc)
        return Result(port, time.perf_counter() - start, True)

    def ping_all(self, ports: Iterable[Port]) -> list[Result]:
        """Ping every port in order and return all results."""
        return [self.ping(port) for port in ports]


def pipeline(
    pinger: Pinger,
    batches: Iterable[Sequence[Port]],
    stop: threading.Event | None = None,
) -> Iterator[list[Result]]:
    """Ping each batch of ports and yield its results until input ends or ``stop`` is set."""
    for batch in batches:
        if stop is not None and stop.is_set():
            return
        results = pinger.ping_all(batch)
        if stop is not None and stop.is_set():
            return
        yield results