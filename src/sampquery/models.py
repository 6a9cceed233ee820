"""Provides the data structures decoded from query responses."""
from dataclasses import dataclass
from typing import Mapping

__all__ = (
    "Player",
    "Roster",
    "Rules",
    "ServerInfo",
)


@dataclass(frozen=True)
class ServerInfo:
    """General information about a server."""

    password: bool
    """``True`` if the server requires a password to join."""
    players: int
    """The number of players currently online."""
    max_players: int
    """The maximum number of players that can be online at once."""
    hostname: str
    """The server's name."""
    gamemode: str
    """The name of the gamemode being played."""
    language: str
    """The language reported by the server."""


@dataclass(frozen=True)
class Player:
    """Represents a player listed by the server.

    :py:attr:`id` and :py:attr:`ping` are only sent in response to a
    :py:attr:`~sampquery.QueryType.DETAILED_PLAYERS` query. They are either
    both present or both ``None``.

    """

    name: str
    """The player's nickname."""
    score: int
    """The player's score."""
    id: int | None = None
    """The ID assigned to this player by the server."""
    ping: int | None = None
    """The player's ping in milliseconds."""

    def __post_init__(self):
        if (self.id is None) != (self.ping is None):
            raise ValueError("id and ping must either both be set or both be None")

    @property
    def is_detailed(self) -> bool:
        """Indicates if this record came from a detailed player query."""
        return self.id is not None


Rules = Mapping[str, str]
"""A read-only mapping of rule names to their values."""

Roster = tuple[Player, ...]
"""The players listed by the server, in the order they were sent."""
