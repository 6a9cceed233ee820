"""
Defines the request packet sent to the server and the address
embedded inside of it.
"""
import enum
import ipaddress
from dataclasses import dataclass

from ..errors import AddressParseError
from .errors import MalformedResponseError

__all__ = (
    "HEADER_SIZE",
    "MAGIC",
    "Endpoint",
    "QueryType",
    "RequestPacket",
)

MAGIC = b"SAMP"
"""The four bytes starting every request and response."""

HEADER_SIZE = 11
"""The size of the request envelope, which the server echoes back."""


class QueryType(enum.Enum):
    """The kind of information requested from the server.

    The :py:attr:`value` of this enum is the opcode byte placed at the
    end of the request envelope.

    """

    INFO = ord("i")
    """Requests the hostname, gamemode, language and player counts."""

    RULES = ord("r")
    """Requests the list of server rules."""

    PLAYERS = ord("c")
    """Requests the name and score of every player."""

    DETAILED_PLAYERS = ord("d")
    """Requests the ID, name, score and ping of every player.

    The server does not respond to this query once 255 or more
    players are connected.

    """

    @property
    def opcode(self) -> bytes:
        """The opcode as a single byte string."""
        return bytes((self.value,))


@dataclass(frozen=True)
class Endpoint:
    """The IPv4 address and port of a server."""

    ip: ipaddress.IPv4Address
    """The server's IPv4 address."""
    port: int
    """The server's UDP port."""

    def __post_init__(self):
        if self.port not in range(65536):
            raise AddressParseError(f"port must be within 0-65535, not {self.port!r}")

    def __str__(self):
        return f"{self.ip}:{self.port}"

    @classmethod
    def parse(cls, host: str, port: int) -> "Endpoint":
        """Parses a dotted IPv4 literal and a port.

        :raises AddressParseError:
            The host is not a valid IPv4 address or the port is out of range.

        """
        try:
            ip = ipaddress.IPv4Address(host)
        except ValueError as e:
            raise AddressParseError(f"invalid IPv4 address: {host!r}") from e

        if isinstance(port, bool) or not isinstance(port, int):
            raise AddressParseError(f"port must be an integer, not {port!r}")

        return cls(ip, port)

    @property
    def address(self) -> tuple[str, int]:
        """The address tuple accepted by :py:mod:`socket` functions."""
        return str(self.ip), self.port

    @property
    def packed(self) -> bytes:
        """The six bytes identifying this endpoint inside a packet."""
        return self.ip.packed + self.port.to_bytes(2, "little")


class RequestPacket:
    """The datagram sent to the server to request information.

    Every request is exactly :py:data:`HEADER_SIZE` bytes long and is made
    up of the :py:data:`MAGIC` bytes, the server's packed :py:class:`Endpoint`,
    and the opcode of the :py:class:`QueryType`.

    :param endpoint: The address of the server being queried.
    :param query_type: The kind of information to request.

    """

    __slots__ = ("data",)

    def __init__(self, endpoint: Endpoint, query_type: QueryType):
        self.data = MAGIC + endpoint.packed + query_type.opcode

    def __repr__(self):
        return "{}({!r}, {})".format(
            type(self).__name__, self.endpoint, self.query_type
        )

    def __eq__(self, other):
        if isinstance(other, RequestPacket):
            return self.data == other.data
        return NotImplemented

    def __hash__(self):
        return hash(self.data)

    @property
    def endpoint(self) -> Endpoint:
        """The endpoint embedded in this packet."""
        ip = ipaddress.IPv4Address(self.data[4:8])
        port = int.from_bytes(self.data[8:10], "little")
        return Endpoint(ip, port)

    @property
    def query_type(self) -> QueryType:
        """The query type selected by this packet's opcode."""
        return QueryType(self.data[10])

    @classmethod
    def from_bytes(cls, data: bytes) -> "RequestPacket":
        """Parses the envelope at the start of the given data.

        Any bytes following the envelope are ignored, making this
        suitable for reading the envelope echoed in a response.

        :raises MalformedResponseError:
            The data is too short, does not start with the magic bytes,
            or has an unknown opcode.

        """
        if len(data) < HEADER_SIZE:
            raise MalformedResponseError(
                f"expected at least {HEADER_SIZE} bytes, received {len(data)}"
            )
        elif data[:4] != MAGIC:
            raise MalformedResponseError(f"expected {MAGIC!r} as start of header")

        try:
            query_type = QueryType(data[10])
        except ValueError:
            raise MalformedResponseError(f"unknown opcode: {data[10]:#04x}") from None

        ip = ipaddress.IPv4Address(data[4:8])
        port = int.from_bytes(data[8:10], "little")
        return cls(Endpoint(ip, port), query_type)
