import dataclasses

import pytest

from tests.responses import (
    detailed_players_body,
    info_body,
    make_response,
    players_body,
    rules_body,
    sample_detailed_players,
    sample_info,
    sample_players,
    sample_rules,
)

from sampquery import (
    AddressParseError,
    MalformedResponseError,
    QuerySession,
    QueryType,
    SessionClosedError,
    SessionState,
    TransportTimeout,
)
from sampquery.protocol import Endpoint

from . import FakeTransport

HOST = "127.0.0.1"
PORT = 7777
endpoint = Endpoint.parse(HOST, PORT)


def info_response(players: int = sample_info.players) -> bytes:
    info = dataclasses.replace(sample_info, players=players)
    return make_response(endpoint, QueryType.INFO, info_body(info))


rules_response = make_response(endpoint, QueryType.RULES, rules_body(sample_rules))
players_response = make_response(
    endpoint, QueryType.PLAYERS, players_body(sample_players)
)
detailed_response = make_response(
    endpoint,
    QueryType.DETAILED_PLAYERS,
    detailed_players_body(sample_detailed_players),
)


def make_session(*replies) -> tuple[QuerySession, FakeTransport]:
    transport = FakeTransport(*replies)
    session = QuerySession(HOST, PORT, transport=transport)  # type: ignore
    return session, transport


def test_initial_state():
    session, _ = make_session()
    assert session.state == SessionState()
    assert session.info is None
    assert session.rules is None
    assert session.players is None
    assert session.latency is None


def test_single_queries():
    """Asserts each query replaces only its own result and the latency."""
    session, transport = make_session(
        info_response(), rules_response, detailed_response, players_response
    )

    assert session.fetch_info() == sample_info
    assert session.info == sample_info
    assert session.rules is None
    assert session.latency is not None and session.latency >= 0

    assert session.fetch_rules() == sample_rules
    assert session.rules == sample_rules
    assert session.info == sample_info

    assert session.fetch_players(detailed=True) == sample_detailed_players
    assert session.players == sample_detailed_players

    assert session.fetch_players(detailed=False) == sample_players
    assert session.players == sample_players
    assert all(not p.is_detailed for p in session.players)

    assert transport.sent_types == [
        QueryType.INFO,
        QueryType.RULES,
        QueryType.DETAILED_PLAYERS,
        QueryType.PLAYERS,
    ]
    assert transport.sent[0] == b"SAMP\x7f\x00\x00\x01\x61\x1ei"


def test_state_replaced_wholesale():
    session, _ = make_session(info_response(), rules_response)
    session.fetch_info()
    before = session.state
    session.fetch_rules()
    assert session.state is not before
    assert before.rules is None


@pytest.mark.parametrize(
    "players, expected",
    [
        (0, QueryType.DETAILED_PLAYERS),
        (254, QueryType.DETAILED_PLAYERS),
        (255, QueryType.PLAYERS),
        (1000, QueryType.PLAYERS),
    ],
)
def test_refresh_roster_query(players: int, expected: QueryType):
    """Asserts refresh() picks the player query from the info it just received."""
    roster = detailed_response if expected is QueryType.DETAILED_PLAYERS else players_response
    session, transport = make_session(info_response(players), rules_response, roster)

    state = session.refresh()

    assert transport.sent_types == [QueryType.INFO, QueryType.RULES, expected]
    assert state is session.state
    assert state.info is not None and state.info.players == players
    assert state.rules == sample_rules
    assert state.players is not None
    assert all(p.is_detailed == (expected is QueryType.DETAILED_PLAYERS) for p in state.players)


def test_fetch_players_uses_last_info():
    session, transport = make_session(info_response(300), players_response)
    session.fetch_info()
    session.fetch_players()
    assert transport.sent_types[-1] is QueryType.PLAYERS

    session, transport = make_session(detailed_response)
    session.fetch_players()
    assert transport.sent_types == [QueryType.DETAILED_PLAYERS]


def test_refresh_aborts_on_info_failure():
    session, transport = make_session(TransportTimeout("timed out"))

    with pytest.raises(TransportTimeout):
        session.refresh()

    assert transport.sent_types == [QueryType.INFO]
    assert session.state == SessionState()


def test_refresh_rules_failure():
    """Asserts a failed rules query keeps the info already received
    while leaving the rules and players untouched.
    """
    session, transport = make_session(
        info_response(3), rules_response, detailed_response,
        info_response(42), TransportTimeout("timed out"),
    )
    session.refresh()
    previous = session.state

    with pytest.raises(TransportTimeout):
        session.refresh()

    assert session.info is not None and session.info.players == 42
    assert session.rules is previous.rules
    assert session.players is previous.players
    assert transport.sent_types[3:] == [QueryType.INFO, QueryType.RULES]


@pytest.mark.parametrize(
    "query_type, body",
    [
        (QueryType.INFO, info_body(sample_info)[:-1]),
        (QueryType.RULES, b"\x05\x00"),
        (QueryType.PLAYERS, b"\x01\x00\x09short"),
        (QueryType.DETAILED_PLAYERS, b"\x01\x00\x00\x04nick\x00"),
    ],
)
def test_malformed_response_keeps_state(query_type: QueryType, body: bytes):
    session, _ = make_session(
        info_response(), rules_response, detailed_response,
        make_response(endpoint, query_type, body),
    )
    session.refresh()
    previous = session.state

    with pytest.raises(MalformedResponseError):
        session.query(query_type)

    assert session.state is previous


def test_transport_failure_allows_next_query():
    """Asserts a timed out query does not block the following one."""
    session, _ = make_session(TransportTimeout("timed out"), info_response())

    with pytest.raises(TransportTimeout):
        session.fetch_info()
    assert session.info is None
    assert session.latency is None

    assert session.fetch_info() == sample_info


def test_closed_session():
    session, transport = make_session(info_response())

    with session:
        assert not session.closed
    assert session.closed
    session.close()

    with pytest.raises(SessionClosedError):
        session.fetch_info()
    with pytest.raises(SessionClosedError):
        session.refresh()
    assert transport.sent == []


def test_encoding():
    session, _ = make_session()
    assert session.encoding == "cp1251"

    session = QuerySession(HOST, PORT, encoding=1252, transport=FakeTransport())  # type: ignore
    assert session.encoding == "cp1252"

    with pytest.raises(LookupError):
        QuerySession(HOST, PORT, encoding="not-a-codec", transport=FakeTransport())  # type: ignore


@pytest.mark.parametrize("host", ["localhost", "300.1.1.1", "1.2.3.4.5"])
def test_invalid_address(host: str):
    with pytest.raises(AddressParseError):
        QuerySession(host, PORT, transport=FakeTransport())  # type: ignore


def test_pending_datagrams_discarded_before_each_query():
    session, transport = make_session(info_response(), rules_response, detailed_response)
    session.refresh()
    assert transport.discard_count == 3


def test_rules_snapshot_read_only():
    session, _ = make_session(rules_response)
    session.fetch_rules()
    assert session.rules is not None

    with pytest.raises(TypeError):
        session.rules["weather"] = "0"  # type: ignore
    assert session.rules == sample_rules
