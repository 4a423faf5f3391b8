"""A connection to a beanstalkd server: command framing and response classification."""

from __future__ import annotations

import enum
from typing import Any

from .command import Command
from .config import DEFAULT_HOST, ConnectionOptions
from .errors import ClientError, ConnectionError, SocketError, server_error
from .logger import LogLevel, create_logger
from .protocol import CRLF, CRLF_LENGTH, DEFAULT_PORT, ENCODING, ResponseLine, build_frame
from .transport import SocketTransport, Transport, TransportFactory
from .types import DispatchResult


class ConnectionState(enum.Enum):
    UNCONNECTED = "unconnected"
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """Owns at most one transport and runs one command exchange at a time.

    The transport is created on first use. After :meth:`disconnect` the next
    dispatch connects again with a fresh transport. Instances are not safe to
    share between threads.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: Any = None,
        *,
        transport: Transport | None = None,
        transport_factory: TransportFactory | None = None,
        logger: object | None = None,
        log_level: LogLevel = "info",
    ) -> None:
        options = ConnectionOptions(host=host, port=port, timeout=timeout, logger=logger, log_level=log_level)
        self._host = options.host
        self._port = options.port
        self._timeout = options.timeout
        self._logger = create_logger(logger=options.logger, level=options.log_level)
        self._log = self._logger.child("connection")
        self._transport_factory: TransportFactory = transport_factory or SocketTransport.connect
        self._transport: Transport | None = None
        self._state = ConnectionState.UNCONNECTED
        if transport is not None:
            self.set_transport(transport)

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "Connection":
        options = ConnectionOptions.from_url(url)
        return cls(options.host, options.port, kwargs.pop("timeout", options.timeout), **kwargs)

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def has_transport(self) -> bool:
        return self._transport is not None

    def set_transport(self, transport: Transport) -> "Connection":
        """Use an already connected transport, e.g. a test double."""
        self._transport = transport
        self._state = ConnectionState.OPEN
        return self

    def dispatch(self, command: Command) -> Any:
        transport = self._ensure_transport()

        payload = (command.data or b"") if command.has_data else None
        frame = build_frame(command.command_line, payload)
        self._log.debug("-> %s (%d bytes)", command.command_line, len(frame))
        transport.write(frame)

        line = transport.read_line().decode(ENCODING, errors="replace")
        self._log.debug("<- %s", line)
        response = ResponseLine.parse(line)

        kind = response.error_kind
        if kind is not None:
            self._log.warn("Server answered %s to '%s'", kind.value, command)
            raise server_error(kind, line, str(command))

        data = self._read_data(transport, response) if response.has_data else None
        return command.response_parser.parse_response(line, data)

    def dispatch_safe(self, command: Command) -> DispatchResult[Any]:
        try:
            return DispatchResult(ok=True, data=self.dispatch(command))
        except Exception as exc:
            return DispatchResult(ok=False, error=exc)

    def disconnect(self) -> None:
        """Close the live transport; the next dispatch reconnects.

        Raises SocketError when there is no live transport.
        """
        if self._transport is None:
            raise SocketError("The connection was closed")
        transport = self._transport
        self._transport = None
        self._state = ConnectionState.CLOSED
        self._log.info("Disconnecting from %s:%s", self._host, self._port)
        transport.disconnect()

    def is_service_listening(self) -> bool:
        try:
            self._ensure_transport()
        except ConnectionError as exc:
            self._log.debug("Service check for %s:%s failed: %s", self._host, self._port, exc)
            return False
        return True

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._transport is not None:
            self.disconnect()

    def _ensure_transport(self) -> Transport:
        if self._transport is None:
            if self._state is ConnectionState.CLOSED:
                self._log.info("Reconnecting to %s:%s", self._host, self._port)
            self._transport = self._transport_factory(self._host, self._port, self._timeout, logger=self._logger)
            self._state = ConnectionState.OPEN
        return self._transport

    def _read_data(self, transport: Transport, response: ResponseLine) -> bytes:
        length = response.data_length()
        data = transport.read(length)
        trailer = transport.read(CRLF_LENGTH)
        if trailer != CRLF:
            raise ClientError(
                f"Expected {CRLF_LENGTH} bytes of CRLF after {length} bytes of data",
                context={"length": length, "trailer": trailer},
            )
        self._log.trace("Read %d bytes of job data", length)
        return data


__all__ = ["Connection", "ConnectionState"]
