"""Public surface for the beanstalk client."""

from .command import Command, RawCommand, Response, ResponseParser, StatusResponseParser
from .config import ConnectionOptions
from .connection import Connection, ConnectionState
from .errors import (
    BeanstalkError,
    ClientError,
    ConnectionError,
    ServerBadFormatError,
    ServerDrainingError,
    ServerError,
    ServerErrorKind,
    ServerInternalError,
    ServerOutOfMemoryError,
    ServerUnknownCommandError,
    SocketError,
    UnexpectedResponseError,
)
from .transport import SocketTransport, Transport, TransportState
from .types import DispatchResult
from .version import __version__

__all__ = [
    "__version__",
    "BeanstalkError",
    "ClientError",
    "Command",
    "Connection",
    "ConnectionError",
    "ConnectionOptions",
    "ConnectionState",
    "DispatchResult",
    "RawCommand",
    "Response",
    "ResponseParser",
    "ServerBadFormatError",
    "ServerDrainingError",
    "ServerError",
    "ServerErrorKind",
    "ServerInternalError",
    "ServerOutOfMemoryError",
    "ServerUnknownCommandError",
    "SocketError",
    "SocketTransport",
    "StatusResponseParser",
    "Transport",
    "TransportState",
    "UnexpectedResponseError",
]
