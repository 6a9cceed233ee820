"""Contains a Sans-IO implementation of the SA-MP query protocol.

Suggested reading about sansio:
    https://fractalideas.com/blog/sans-io-when-rubber-meets-road/
    https://sans-io.readthedocs.io/index.html

"""

from .client import QueryState as QueryState, SAMPQueryProtocol as SAMPQueryProtocol
from .codec import (
    DEFAULT_ENCODING as DEFAULT_ENCODING,
    DETAILED_PLAYERS_LIMIT as DETAILED_PLAYERS_LIMIT,
    decode_detailed_players as decode_detailed_players,
    decode_info as decode_info,
    decode_players as decode_players,
    decode_response as decode_response,
    decode_rules as decode_rules,
    select_roster_query as select_roster_query,
)
from .errors import (
    InvalidStateError as InvalidStateError,
    MalformedResponseError as MalformedResponseError,
)
from .packet import (
    HEADER_SIZE as HEADER_SIZE,
    MAGIC as MAGIC,
    Endpoint as Endpoint,
    QueryType as QueryType,
    RequestPacket as RequestPacket,
)
from .reader import PacketReader as PacketReader
