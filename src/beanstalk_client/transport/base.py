"""Common transport abstractions."""

from __future__ import annotations

import enum
from typing import Protocol, runtime_checkable


class TransportState(enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


@runtime_checkable
class Transport(Protocol):
    """Byte-exact, blocking I/O over one server connection."""

    @property
    def state(self) -> TransportState: ...

    def write(self, data: bytes) -> None: ...

    def read(self, length: int) -> bytes: ...

    def read_line(self) -> bytes: ...

    def disconnect(self) -> None: ...


class TransportFactory(Protocol):
    def __call__(self, host: str, port: int, timeout: float, *, logger=None) -> Transport: ...


__all__ = ["Transport", "TransportFactory", "TransportState"]
