"""Decodes the body of each kind of query response."""
import types
from typing import Callable

from ..models import Player, Roster, Rules, ServerInfo
from .errors import MalformedResponseError
from .packet import QueryType
from .reader import PacketReader

__all__ = (
    "DETAILED_PLAYERS_LIMIT",
    "DEFAULT_ENCODING",
    "decode_detailed_players",
    "decode_info",
    "decode_players",
    "decode_response",
    "decode_rules",
    "select_roster_query",
)

DEFAULT_ENCODING = "cp1251"
"""The code page used for the hostname, gamemode and language."""

TEXT_ENCODING = "utf-8"
"""The codec used for rule names, rule values and player names."""

DETAILED_PLAYERS_LIMIT = 255
"""The player count at which servers stop answering detailed player queries.

Player IDs are sent as a single byte, so servers with this many players
or more do not respond to :py:attr:`QueryType.DETAILED_PLAYERS`.

"""

Response = ServerInfo | Rules | Roster


def decode_info(reader: PacketReader, encoding: str = DEFAULT_ENCODING) -> ServerInfo:
    """Decodes the body of an :py:attr:`QueryType.INFO` response."""
    password = reader.read_bool()
    players = reader.read_u16()
    max_players = reader.read_u16()
    hostname = reader.read_string(4, encoding)
    gamemode = reader.read_string(4, encoding)
    language = reader.read_string(4, encoding)
    return ServerInfo(
        password=password,
        players=players,
        max_players=max_players,
        hostname=hostname,
        gamemode=gamemode,
        language=language,
    )


def decode_rules(reader: PacketReader, encoding: str = TEXT_ENCODING) -> Rules:
    """Decodes the body of a :py:attr:`QueryType.RULES` response.

    :raises MalformedResponseError: The same rule name was sent twice.

    """
    rules: dict[str, str] = {}
    for _ in range(reader.read_u16()):
        name = reader.read_string(1, encoding)
        value = reader.read_string(1, encoding)
        if name in rules:
            raise MalformedResponseError(f"duplicate rule: {name!r}")
        rules[name] = value
    return types.MappingProxyType(rules)


def decode_players(reader: PacketReader, encoding: str = TEXT_ENCODING) -> Roster:
    """Decodes the body of a :py:attr:`QueryType.PLAYERS` response."""
    players = []
    for _ in range(reader.read_u16()):
        name = reader.read_string(1, encoding)
        score = reader.read_u32()
        players.append(Player(name, score))
    return tuple(players)


def decode_detailed_players(
    reader: PacketReader,
    encoding: str = TEXT_ENCODING,
) -> Roster:
    """Decodes the body of a :py:attr:`QueryType.DETAILED_PLAYERS` response."""
    players = []
    for _ in range(reader.read_u16()):
        id = reader.read_u8()
        name = reader.read_string(1, encoding)
        score = reader.read_u32()
        ping = reader.read_u32()
        players.append(Player(name, score, id=id, ping=ping))
    return tuple(players)


def decode_response(
    query_type: QueryType,
    body: bytes,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> Response:
    """Decodes a response body, after the echoed envelope has been removed.

    Bytes left over after the last field are ignored.

    :param query_type: The query type that the server is responding to.
    :param body: The data following the envelope.
    :param encoding:
        The code page used for the text fields of an
        :py:attr:`QueryType.INFO` response.
    :raises MalformedResponseError:
        A field extends past the end of the data or the
        response is otherwise invalid.

    """
    reader = PacketReader(body)
    if query_type is QueryType.INFO:
        return decode_info(reader, encoding)

    decoder: Callable[[PacketReader], Response]
    if query_type is QueryType.RULES:
        decoder = decode_rules
    elif query_type is QueryType.PLAYERS:
        decoder = decode_players
    elif query_type is QueryType.DETAILED_PLAYERS:
        decoder = decode_detailed_players
    else:
        raise RuntimeError(f"unhandled QueryType enum: {query_type}")  # pragma: no cover

    return decoder(reader)


def select_roster_query(players_online: int) -> QueryType:
    """Returns the player query that the server will answer for
    the given number of online players.
    """
    if players_online >= DETAILED_PLAYERS_LIMIT:
        return QueryType.PLAYERS
    return QueryType.DETAILED_PLAYERS
