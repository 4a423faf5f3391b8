"""TCP transport using the standard library socket module."""

from __future__ import annotations

import socket
import time

from ..errors import ConnectionError, SocketError
from ..logger import BoundLogger, create_logger
from ..protocol import DEFAULT_TIMEOUT
from .base import TransportState


class SocketTransport:
    """Blocking socket with exact-length reads and deadline-bounded line reads.

    Every read operation runs against one deadline taken when the call starts;
    the socket timeout is narrowed to the time left before each ``recv`` and
    restored to the configured value afterwards, so ``write`` and connect keep
    the plain per-connection timeout.
    """

    # largest chunk inspected per peek while looking for the line delimiter
    PEEK_SIZE = 1024

    def __init__(
        self,
        sock: socket.socket,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        logger: BoundLogger | None = None,
    ) -> None:
        self._socket: socket.socket | None = sock
        self._timeout = timeout
        self._logger = (logger or create_logger()).child("socket")
        sock.settimeout(timeout)

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        logger: BoundLogger | None = None,
    ) -> "SocketTransport":
        bound = create_logger(logger=logger)
        context = {"host": host, "port": port}
        bound.info("Connecting to %s:%s (timeout=%ss)", host, port, timeout)
        try:
            addresses = socket.getaddrinfo(host, port, socket.AF_UNSPEC, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except socket.gaierror as exc:
            raise ConnectionError(
                f"Could not resolve hostname {host}: {exc}", errno=exc.errno, context=context
            ) from exc
        if not addresses:
            raise ConnectionError(f"Could not resolve hostname {host}", errno=0, context=context)

        family, socktype, proto, _, address = addresses[0]
        sock = socket.socket(family, socktype, proto)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
            sock.settimeout(timeout)
            sock.connect(address)
        except OSError as exc:
            sock.close()
            bound.warn("Connect to %s:%s failed: %s", host, port, exc)
            raise ConnectionError(
                f"Cannot connect to {host}:{port}: {exc}", errno=exc.errno, context=context
            ) from exc
        except BaseException:
            sock.close()
            raise
        return cls(sock, timeout=timeout, logger=bound)

    @property
    def state(self) -> TransportState:
        return TransportState.OPEN if self._socket is not None else TransportState.CLOSED

    @property
    def timeout(self) -> float:
        return self._timeout

    def write(self, data: bytes) -> None:
        sock = self._require_open()
        view = memoryview(data)
        sent_total = 0
        while sent_total < len(view):
            try:
                sent = sock.send(view[sent_total:])
            except OSError as exc:
                raise self._io_error(exc, "write") from exc
            if sent == 0:
                raise SocketError(
                    "Connection closed by server during write",
                    context={"sent": sent_total, "expected": len(view)},
                )
            sent_total += sent
        self._logger.trace("Wrote %d bytes", sent_total)

    def read(self, length: int) -> bytes:
        if length < 0:
            raise ValueError("length must be >= 0")
        sock = self._require_open()
        return self._read_exact(sock, length, time.monotonic() + self._timeout)

    def read_line(self) -> bytes:
        """Read up to and including the next ``\\n``; return it without ``\\r\\n``.

        Bytes after the delimiter stay in the socket buffer for the next read.
        """
        sock = self._require_open()
        deadline = time.monotonic() + self._timeout
        line = bytearray()
        while True:
            peeked = self._recv(sock, self.PEEK_SIZE, deadline, socket.MSG_PEEK)
            if not peeked:
                raise SocketError(
                    "Connection closed by server while reading a line",
                    context={"partial": bytes(line)},
                )
            newline = peeked.find(b"\n")
            wanted = len(peeked) if newline < 0 else newline + 1
            line += self._read_exact(sock, wanted, deadline)
            if newline >= 0:
                break
        self._logger.trace("Read line of %d bytes", len(line))
        return bytes(line).rstrip(b"\r\n")

    def disconnect(self) -> None:
        sock = self._require_open()
        self._socket = None
        try:
            sock.close()
        except OSError as exc:
            raise self._io_error(exc, "close") from exc
        self._logger.debug("Socket closed")

    def _read_exact(self, sock: socket.socket, length: int, deadline: float) -> bytes:
        buffer = bytearray()
        while len(buffer) < length:
            chunk = self._recv(sock, length - len(buffer), deadline)
            if not chunk:
                raise SocketError(
                    f"Connection closed by server after {len(buffer)} of {length} bytes",
                    context={"received": len(buffer), "expected": length},
                )
            buffer += chunk
        return bytes(buffer)

    def _recv(self, sock: socket.socket, size: int, deadline: float, flags: int = 0) -> bytes:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise SocketError("Timeout has been reached", context={"timeout": self._timeout})
        sock.settimeout(remaining)
        try:
            return sock.recv(size, flags)
        except (socket.timeout, TimeoutError) as exc:
            raise SocketError("Timeout has been reached", context={"timeout": self._timeout}) from exc
        except OSError as exc:
            raise self._io_error(exc, "read") from exc
        finally:
            sock.settimeout(self._timeout)

    def _require_open(self) -> socket.socket:
        if self._socket is None:
            raise SocketError("The connection was closed")
        return self._socket

    def _io_error(self, exc: OSError, operation: str) -> SocketError:
        self._logger.warn("Socket %s failed: %s", operation, exc)
        return SocketError(exc.strerror or str(exc), errno=exc.errno, context={"operation": operation})


__all__ = ["SocketTransport"]
