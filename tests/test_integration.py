import socket
import threading

import pytest

from beanstalk_client import Connection, RawCommand, Response, ServerUnknownCommandError, StatusResponseParser
from beanstalk_client.protocol import INSERTED, KICKED, RESERVED


class ScriptedServer:
    """Accepts connections and answers each received command line from a script."""

    def __init__(self, replies: dict[bytes, bytes]) -> None:
        self.replies = replies
        self.received: list[bytes] = []
        self.accepted = 0
        self._stopped = threading.Event()
        self._server = socket.create_server(("127.0.0.1", 0))
        self._server.settimeout(0.05)
        self.port = self._server.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while not self._stopped.is_set():
            try:
                peer, _ = self._server.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            peer.settimeout(None)
            self.accepted += 1
            with peer:
                buffer = b""
                while True:
                    chunk = peer.recv(4096)
                    if not chunk:
                        break
                    buffer += chunk
                    while b"\r\n" in buffer:
                        line, buffer = buffer.split(b"\r\n", 1)
                        if line not in self.replies:
                            continue
                        self.received.append(line)
                        peer.sendall(self.replies[line])

    def close(self) -> None:
        self._stopped.set()
        self._thread.join(timeout=1)
        self._server.close()


@pytest.fixture
def server():
    scripted = ScriptedServer(
        {
            b"put 0 0 60 5": b"INSERTED 3\r\n",
            b"reserve": b"RESERVED 3 5\r\nhello\r\n",
            b"kick-everything": b"UNKNOWN_COMMAND\r\n",
        }
    )
    yield scripted
    scripted.close()


def test_put_and_reserve_round_trip(server: ScriptedServer) -> None:
    with Connection("127.0.0.1", server.port, 1.0) as connection:
        inserted = connection.dispatch(
            RawCommand("put 0 0 60 5", StatusResponseParser({INSERTED}), data=b"hello")
        )
        reserved = connection.dispatch(RawCommand("reserve", StatusResponseParser({RESERVED})))

    assert inserted == Response(status=INSERTED, args=["3"])
    assert reserved == Response(status=RESERVED, args=["3", "5"], data=b"hello")
    assert server.received == [b"put 0 0 60 5", b"reserve"]


def test_server_error_then_reconnect(server: ScriptedServer) -> None:
    connection = Connection("127.0.0.1", server.port, 1.0)
    assert connection.is_service_listening() is True
    with pytest.raises(ServerUnknownCommandError):
        connection.dispatch(RawCommand("kick-everything", StatusResponseParser({KICKED})))
    connection.disconnect()

    reserved = connection.dispatch(RawCommand("reserve", StatusResponseParser({RESERVED})))
    assert reserved.data == b"hello"
    connection.disconnect()
    assert server.accepted == 2
