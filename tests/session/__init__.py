import collections
import socket
import threading
import time
from typing import Callable, Mapping

from sampquery import QueryType, RequestPacket, TransportError

Reply = bytes | BaseException


class FakeTransport:
    """A transport returning scripted replies instead of using a socket.

    Each reply is either the full response datagram or an exception
    that :py:meth:`receive()` should raise.

    """

    def __init__(self, *replies: Reply):
        self.replies = collections.deque(replies)
        self.sent: list[bytes] = []
        self.close_count = 0
        self.discard_count = 0

    @property
    def closed(self) -> bool:
        return self.close_count > 0

    def close(self) -> None:
        self.close_count += 1

    def discard_pending(self) -> int:
        self.discard_count += 1
        return 0

    def send(self, data: bytes) -> None:
        if self.closed:
            raise TransportError("transport is closed")
        self.sent.append(data)

    def receive(self, max_size: int = 65507) -> bytes:
        reply = self.replies.popleft()
        if isinstance(reply, BaseException):
            raise reply
        return reply

    @property
    def sent_types(self) -> list[QueryType]:
        return [RequestPacket.from_bytes(data).query_type for data in self.sent]


class FakeServer:
    """A UDP server on the loopback interface answering query requests.

    :param bodies:
        A mapping of query types to the bodies that should follow the
        echoed envelope. Query types missing from the mapping are ignored,
        letting the client time out.

    """

    def __init__(self, bodies: Mapping[QueryType, bytes | Callable[[], bytes]]):
        self.bodies = bodies
        self.received: list[QueryType] = []

        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(0.05)

        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    @property
    def port(self) -> int:
        return self.sock.getsockname()[1]

    def __enter__(self):
        self._thread.start()
        return self

    def __exit__(self, exc_type, exc_val, tb):
        self._stop.set()
        self._thread.join()
        self.sock.close()

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                data, addr = self.sock.recvfrom(2048)
            except TimeoutError:
                continue

            query_type = RequestPacket.from_bytes(data).query_type
            self.received.append(query_type)

            body = self.bodies.get(query_type)
            if body is None:
                continue
            elif callable(body):
                body = body()

            self.sock.sendto(data[:11] + body, addr)


def delayed_once(body: bytes, delay: float) -> Callable[[], bytes]:
    """Returns a body that is sent late the first time it is requested."""
    calls = 0

    def get_body() -> bytes:
        nonlocal calls
        calls += 1
        if calls == 1:
            time.sleep(delay)
        return body

    return get_body
