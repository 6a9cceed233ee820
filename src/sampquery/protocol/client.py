import enum

from .codec import DEFAULT_ENCODING, Response, decode_response
from .errors import InvalidStateError, MalformedResponseError
from .packet import HEADER_SIZE, Endpoint, QueryType, RequestPacket


class QueryState(enum.Enum):
    """Defines the current state of the protocol."""

    IDLE = enum.auto()
    """No request is waiting for a response."""
    AWAITING_RESPONSE = enum.auto()
    """A request was sent and the protocol is waiting for its response."""


class SAMPQueryProtocol:
    """Implements the client-side portion of the query protocol
    for a single server.

    Only one request can be outstanding at a time since the protocol
    has no way of matching a response to a request other than by its
    opcode.

    :param endpoint: The server being queried.
    :param encoding:
        The code page used to decode the hostname, gamemode and language.

    """

    state: QueryState
    """The current state of the protocol."""

    _pending: RequestPacket | None

    def __init__(self, endpoint: Endpoint, *, encoding: str = DEFAULT_ENCODING):
        self.endpoint = endpoint
        self.encoding = encoding
        self.reset()

    def __repr__(self) -> str:
        return "<{} {} {}>".format(
            type(self).__name__,
            self.endpoint,
            self.state.name.lower().replace("_", " "),
        )

    @property
    def pending(self) -> QueryType | None:
        """The query type waiting for a response, if any."""
        if self._pending is None:
            return None
        return self._pending.query_type

    def send_query(self, query_type: QueryType) -> RequestPacket:
        """Returns the packet requesting the given information.

        :raises InvalidStateError:
            Another request is still waiting for its response.

        """
        self._assert_state(QueryState.IDLE)
        self._pending = RequestPacket(self.endpoint, query_type)
        self.state = QueryState.AWAITING_RESPONSE
        return self._pending

    def receive_datagram(self, data: bytes) -> Response:
        """Handles the response to the outstanding request.

        The protocol returns to the idle state whether or not
        the response could be decoded.

        :returns: The decoded :py:class:`ServerInfo`, rules, or players.
        :raises InvalidStateError: No request is waiting for a response.
        :raises MalformedResponseError:
            The response does not match the request or could not be decoded.

        """
        self._assert_state(QueryState.AWAITING_RESPONSE)
        assert self._pending is not None

        query_type = self._pending.query_type
        self.invalidate_query()

        echoed = RequestPacket.from_bytes(data)
        if echoed.query_type is not query_type:
            raise MalformedResponseError(
                f"expected a response to {query_type.name}, "
                f"received {echoed.query_type.name} instead"
            )

        return decode_response(query_type, data[HEADER_SIZE:], encoding=self.encoding)

    def invalidate_query(self) -> None:
        """Discards the outstanding request.

        This should be called whenever a request fails to send or
        its response times out. If no request is outstanding,
        this is a no-op.

        """
        self._pending = None
        self.state = QueryState.IDLE

    def reset(self) -> None:
        """Resets the protocol to the beginning state."""
        self.invalidate_query()

    def _assert_state(self, *states: QueryState) -> None:
        if self.state not in states:
            raise InvalidStateError(self.state, states)
