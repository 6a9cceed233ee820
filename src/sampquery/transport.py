import logging
import socket
import weakref

from .errors import TransportError, TransportTimeout
from .protocol import Endpoint

log = logging.getLogger(__name__)

MAX_DATAGRAM_SIZE = 65507
"""The largest payload that can be carried by a UDP datagram over IPv4."""


def _to_seconds(timeout: int) -> float | None:
    if timeout < 0:
        raise ValueError(f"timeout must be 0 or higher, not {timeout!r}")
    elif timeout == 0:
        return None
    return timeout / 1000


class DatagramTransport:
    """A blocking UDP socket connected to a single server.

    Use :py:meth:`open()` to create a transport. The socket is released
    by :py:meth:`close()` or when leaving a ``with`` block; if neither
    happens, it is closed once the transport is garbage collected.

    :param sock: A datagram socket already connected to the endpoint.
    :param endpoint: The server the socket is connected to.
    :param send_timeout:
        The time in milliseconds to wait for a send to complete.
        0 waits indefinitely.
    :param receive_timeout:
        The time in milliseconds to wait for a datagram to arrive.
        0 waits indefinitely.

    """

    def __init__(
        self,
        sock: socket.socket,
        endpoint: Endpoint,
        *,
        send_timeout: int = 5000,
        receive_timeout: int = 5000,
    ):
        self._send_timeout = _to_seconds(send_timeout)
        self._receive_timeout = _to_seconds(receive_timeout)
        self.send_timeout = send_timeout
        self.receive_timeout = receive_timeout
        self.endpoint = endpoint

        self._sock = sock
        self._finalizer = weakref.finalize(self, sock.close)

    def __repr__(self):
        return "<{} {} {}>".format(
            type(self).__name__,
            self.endpoint,
            "closed" if self.closed else "open",
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, tb):
        self.close()

    @classmethod
    def open(
        cls,
        endpoint: Endpoint,
        *,
        send_timeout: int = 5000,
        receive_timeout: int = 5000,
    ) -> "DatagramTransport":
        """Creates a UDP socket connected to the given endpoint.

        :raises TransportError: The socket could not be created or connected.
        :raises ValueError: A timeout is negative.

        """
        _to_seconds(send_timeout)
        _to_seconds(receive_timeout)

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as e:
            raise TransportError(f"could not create socket: {e}") from e

        try:
            sock.connect(endpoint.address)
        except OSError as e:
            sock.close()
            raise TransportError(f"could not connect to {endpoint}: {e}") from e

        log.debug(f"opened socket for {endpoint}")
        return cls(
            sock,
            endpoint,
            send_timeout=send_timeout,
            receive_timeout=receive_timeout,
        )

    @property
    def closed(self) -> bool:
        """Indicates if the socket has been released."""
        return not self._finalizer.alive

    def close(self) -> None:
        """Closes the socket. Calling this more than once is a no-op."""
        if self._finalizer.alive:
            self._finalizer()
            log.debug(f"closed socket for {self.endpoint}")

    def send(self, data: bytes) -> None:
        """Sends a single datagram to the server.

        :raises TransportTimeout: The send timeout elapsed.
        :raises TransportError: The datagram could not be sent.

        """
        self._assert_open()
        try:
            self._sock.settimeout(self._send_timeout)
            self._sock.send(data)
        except TimeoutError as e:
            raise TransportTimeout(f"timed out sending to {self.endpoint}") from e
        except OSError as e:
            raise TransportError(f"could not send to {self.endpoint}: {e}") from e

        log.debug(f"sent {len(data)} byte(s) to {self.endpoint}")

    def discard_pending(self) -> int:
        """Drops any datagrams already waiting on the socket without blocking.

        Replies that arrive after a request timed out are queued on the
        socket, so this should be called before sending a new request.
        Errors left over from an earlier exchange, such as an ICMP
        port unreachable, are dropped as well.

        :returns: The number of datagrams discarded.
        :raises TransportError: The socket failed for another reason.

        """
        self._assert_open()
        discarded = 0
        self._sock.setblocking(False)
        try:
            while True:
                try:
                    self._sock.recv(MAX_DATAGRAM_SIZE)
                except BlockingIOError:
                    break
                except ConnectionError as e:
                    log.debug(f"discarded stale error from {self.endpoint}: {e}")
                    continue
                except OSError as e:
                    raise TransportError(
                        f"could not receive from {self.endpoint}: {e}"
                    ) from e
                discarded += 1
        finally:
            self._sock.setblocking(True)

        if discarded:
            log.warning(f"discarded {discarded} stale datagram(s) from {self.endpoint}")
        return discarded

    def receive(self, max_size: int = MAX_DATAGRAM_SIZE) -> bytes:
        """Waits for a single datagram from the server.

        :param max_size:
            The maximum number of bytes to read.
            Longer datagrams are truncated.
        :raises TransportTimeout: The receive timeout elapsed.
        :raises TransportError:
            The server is unreachable or the socket failed otherwise.

        """
        self._assert_open()
        try:
            self._sock.settimeout(self._receive_timeout)
            data = self._sock.recv(max_size)
        except TimeoutError as e:
            raise TransportTimeout(
                f"{self.endpoint} did not respond within "
                f"{self.receive_timeout}ms"
            ) from e
        except OSError as e:
            raise TransportError(f"could not receive from {self.endpoint}: {e}") from e

        log.debug(f"received {len(data)} byte(s) from {self.endpoint}")
        return data

    def _assert_open(self) -> None:
        if self.closed:
            raise TransportError("transport is closed")
