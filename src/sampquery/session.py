import codecs
import dataclasses
import logging
import time
from dataclasses import dataclass

from .errors import SessionClosedError
from .models import Roster, Rules, ServerInfo
from .protocol import (
    DEFAULT_ENCODING,
    Endpoint,
    QueryType,
    SAMPQueryProtocol,
    select_roster_query,
)
from .protocol.codec import Response
from .transport import DatagramTransport

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    """A snapshot of the most recent results held by a :py:class:`QuerySession`.

    Each successful query produces a new snapshot, so a reference to
    this object never observes a partially applied update.

    """

    info: ServerInfo | None = None
    """The last :py:attr:`QueryType.INFO` response."""
    rules: Rules | None = None
    """The last :py:attr:`QueryType.RULES` response."""
    players: Roster | None = None
    """The last player list, from either kind of player query."""
    latency: float | None = None
    """The round-trip time of the last successful query in milliseconds."""


def _resolve_encoding(encoding: str | int) -> str:
    if isinstance(encoding, int):
        encoding = f"cp{encoding}"
    return codecs.lookup(encoding).name


class QuerySession:
    """Queries a single SA-MP server over UDP.

    A socket is opened when the session is created and remains open
    until :py:meth:`close()` is called or the ``with`` block exits.
    Queries block until the server responds or the receive timeout elapses,
    and errors are never retried.

    The session is not thread-safe; queries must not be issued
    concurrently on the same session.

    :param host: The server's IPv4 address.
    :param port: The server's port.
    :param send_timeout:
        The time in milliseconds to wait for a request to be sent.
        0 waits indefinitely.
    :param receive_timeout:
        The time in milliseconds to wait for a response.
        0 waits indefinitely.
    :param encoding:
        The code page used to decode the hostname, gamemode and language.
        Either a codec name or a Windows code page number like ``1251``.
    :param transport:
        The transport to use instead of opening a new socket.
        The session takes ownership of it and closes it on :py:meth:`close()`.
    :raises AddressParseError: The host or port is invalid.
    :raises LookupError: The encoding is unknown.
    :raises TransportError: The socket could not be opened.

    """

    state: SessionState
    """The results of the most recent successful queries."""

    def __init__(
        self,
        host: str,
        port: int = 7777,
        *,
        send_timeout: int = 5000,
        receive_timeout: int = 5000,
        encoding: str | int = DEFAULT_ENCODING,
        transport: DatagramTransport | None = None,
    ):
        self.endpoint = Endpoint.parse(host, port)
        self.encoding = _resolve_encoding(encoding)
        self.protocol = SAMPQueryProtocol(self.endpoint, encoding=self.encoding)
        self.state = SessionState()

        if transport is None:
            transport = DatagramTransport.open(
                self.endpoint,
                send_timeout=send_timeout,
                receive_timeout=receive_timeout,
            )
        self.transport = transport

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

    @property
    def closed(self) -> bool:
        """Indicates if the session has been closed."""
        return self.transport.closed

    @property
    def info(self) -> ServerInfo | None:
        """The server information from the last successful info query."""
        return self.state.info

    @property
    def rules(self) -> Rules | None:
        """The rules from the last successful rules query."""
        return self.state.rules

    @property
    def players(self) -> Roster | None:
        """The players from the last successful player query."""
        return self.state.players

    @property
    def latency(self) -> float | None:
        """The round-trip time of the last successful query in milliseconds."""
        return self.state.latency

    def close(self) -> None:
        """Closes the underlying socket.

        Calling this more than once is a no-op.

        """
        self.transport.close()

    def query(self, query_type: QueryType) -> Response:
        """Sends a single query and waits for the server's response.

        On success, the matching result and :py:attr:`latency` are replaced
        together. If any error occurs, the previous results are kept.

        :returns: The decoded response.
        :raises SessionClosedError: The session has been closed.
        :raises TransportError: The request could not be sent or timed out.
        :raises MalformedResponseError: The response could not be decoded.

        """
        if self.closed:
            raise SessionClosedError("cannot query a closed session")

        packet = self.protocol.send_query(query_type)
        try:
            self.transport.discard_pending()
            self.transport.send(packet.data)
            start = time.perf_counter()
            data = self.transport.receive()
            latency = (time.perf_counter() - start) * 1000
        except BaseException:
            self.protocol.invalidate_query()
            log.warning(f"{query_type.name} query to {self.endpoint} failed")
            raise

        response = self.protocol.receive_datagram(data)
        log.debug(f"{query_type.name} response received in {latency:.1f}ms")

        if query_type is QueryType.INFO:
            changes = {"info": response}
        elif query_type is QueryType.RULES:
            changes = {"rules": response}
        else:
            changes = {"players": response}

        self.state = dataclasses.replace(self.state, latency=latency, **changes)
        return response

    def fetch_info(self) -> ServerInfo:
        """Queries the server's general information.

        .. seealso:: :py:meth:`query()`

        """
        return self.query(QueryType.INFO)  # type: ignore

    def fetch_rules(self) -> Rules:
        """Queries the server's rules.

        .. seealso:: :py:meth:`query()`

        """
        return self.query(QueryType.RULES)  # type: ignore

    def fetch_players(self, detailed: bool | None = None) -> Roster:
        """Queries the list of players on the server.

        :param detailed:
            Whether to request player IDs and pings. If ``None``,
            this is decided from the last known player count, falling back
            to a detailed query if no info has been received yet.

        .. seealso:: :py:meth:`query()`

        """
        if detailed is None:
            players_online = self.info.players if self.info is not None else 0
            query_type = select_roster_query(players_online)
        elif detailed:
            query_type = QueryType.DETAILED_PLAYERS
        else:
            query_type = QueryType.PLAYERS

        return self.query(query_type)  # type: ignore

    def refresh(self) -> SessionState:
        """Queries the server's info, rules and players in that order.

        The kind of player query is chosen from the player count in the
        info response received during this call. If any query fails,
        the remaining queries are skipped and the error is propagated,
        although results from the queries that did succeed are kept.

        :returns: The updated :py:attr:`state`.

        """
        info = self.fetch_info()
        self.fetch_rules()
        self.query(select_roster_query(info.players))
        return self.state
