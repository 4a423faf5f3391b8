"""Exceptions raised by the beanstalk client."""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Any, Mapping


class BeanstalkError(Exception):
    """Base error for all client failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class ConnectionError(BeanstalkError):
    """Raised when the server cannot be resolved or connected to."""

    def __init__(self, message: str, *, errno: int | None = None, context: Any | None = None) -> None:
        super().__init__(message, context=context)
        self.errno = errno


class SocketError(BeanstalkError):
    """Raised when I/O on an established transport fails."""

    def __init__(self, message: str, *, errno: int | None = None, context: Any | None = None) -> None:
        super().__init__(message, context=context)
        self.errno = errno


class ClientError(BeanstalkError):
    """Raised when the response stream no longer matches the framing rules."""


class UnexpectedResponseError(BeanstalkError):
    """Raised by a response parser for a status its command does not know."""

    def __init__(self, status_line: str, *, context: Any | None = None) -> None:
        super().__init__(f"Unhandled response: {status_line}", context=context)
        self.status_line = status_line


class ServerErrorKind(enum.Enum):
    OUT_OF_MEMORY = "OUT_OF_MEMORY"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DRAINING = "DRAINING"
    BAD_FORMAT = "BAD_FORMAT"
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"


class ServerError(BeanstalkError):
    """Raised when the server answers with one of its global error responses."""

    kind: ServerErrorKind

    def __init__(self, status_line: str, command: str) -> None:
        super().__init__(
            f"{self.kind.value} in response to '{command}'",
            context={"status_line": status_line, "command": command},
        )
        self.status_line = status_line
        self.command = command


class ServerOutOfMemoryError(ServerError):
    kind = ServerErrorKind.OUT_OF_MEMORY


class ServerInternalError(ServerError):
    kind = ServerErrorKind.INTERNAL_ERROR


class ServerDrainingError(ServerError):
    """The server is draining and refuses new jobs; retrying later may work."""

    kind = ServerErrorKind.DRAINING


class ServerBadFormatError(ServerError):
    kind = ServerErrorKind.BAD_FORMAT


class ServerUnknownCommandError(ServerError):
    kind = ServerErrorKind.UNKNOWN_COMMAND


SERVER_ERRORS: Mapping[ServerErrorKind, type[ServerError]] = MappingProxyType(
    {
        ServerErrorKind.OUT_OF_MEMORY: ServerOutOfMemoryError,
        ServerErrorKind.INTERNAL_ERROR: ServerInternalError,
        ServerErrorKind.DRAINING: ServerDrainingError,
        ServerErrorKind.BAD_FORMAT: ServerBadFormatError,
        ServerErrorKind.UNKNOWN_COMMAND: ServerUnknownCommandError,
    }
)


def server_error(kind: ServerErrorKind, status_line: str, command: str) -> ServerError:
    return SERVER_ERRORS[kind](status_line, command)


__all__ = [
    "BeanstalkError",
    "ClientError",
    "ConnectionError",
    "SERVER_ERRORS",
    "ServerBadFormatError",
    "ServerDrainingError",
    "ServerError",
    "ServerErrorKind",
    "ServerInternalError",
    "ServerOutOfMemoryError",
    "ServerUnknownCommandError",
    "SocketError",
    "UnexpectedResponseError",
    "server_error",
]
