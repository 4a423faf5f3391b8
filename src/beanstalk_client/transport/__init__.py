"""Transport implementations exposed to users."""

from .base import Transport, TransportFactory, TransportState
from .tcp import SocketTransport

__all__ = [
    "SocketTransport",
    "Transport",
    "TransportFactory",
    "TransportState",
]
