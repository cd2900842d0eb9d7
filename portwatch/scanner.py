"""TCP port scanning over a contiguous port range."""

from __future__ import annotations

import socket
from dataclasses import dataclass


@dataclass(frozen=True)
class Port:
    """An open port with its metadata."""

    number: int = 0
    protocol: str = ""
    address: str = ""

    def __str__(self) -> str:
        return f"{self.address}:{self.number}/{self.protocol}"


@dataclass
class Scanner:
    """Scans a host for open TCP ports within [min_port, max_port]."""

    host: str
    min_port: int = 1
    max_port: int = 65535
    timeout: float = 0.5

    def scan(self) -> list[Port]:
        """Connect to every port in range and return those that accepted."""
        self._validate()
        open_ports: list[Port] = []
        for number in range(self.min_port, self.max_port + 1):
            try:
                with socket.create_connection((self.host, number), timeout=self.timeout):
                    pass
            except OSError:
                continue
            open_ports.append(Port(number=number, protocol="tcp", address=self.host))
        return open_ports

    def _validate(self) -> None:
        if self.min_port < 1 or self.max_port > 65535:
            raise ValueError(
                f"port range must be between 1 and 65535, got {self.min_port}-{self.max_port}"
            )
        if self.min_port > self.max_port:
            raise ValueError(
                f"min_port ({self.min_port}) must not be greater than max_port ({self.max_port})"
            )
        if not self.host:
            raise ValueError("host must not be empty")