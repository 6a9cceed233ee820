from .errors import (
    AddressParseError as AddressParseError,
    SAMPQueryError as SAMPQueryError,
    SessionClosedError as SessionClosedError,
    SettingsWriteError as SettingsWriteError,
    TransportError as TransportError,
    TransportTimeout as TransportTimeout,
)
from .models import (
    Player as Player,
    Roster as Roster,
    Rules as Rules,
    ServerInfo as ServerInfo,
)
from .protocol import (
    Endpoint as Endpoint,
    InvalidStateError as InvalidStateError,
    MalformedResponseError as MalformedResponseError,
    QueryState as QueryState,
    QueryType as QueryType,
    RequestPacket as RequestPacket,
    SAMPQueryProtocol as SAMPQueryProtocol,
)
from .session import QuerySession as QuerySession, SessionState as SessionState
from .settings import (
    ClientSettings as ClientSettings,
    MemoryStore as MemoryStore,
    RegistryStore as RegistryStore,
    SettingsStore as SettingsStore,
)
from .transport import DatagramTransport as DatagramTransport


def _get_version() -> str:
    from importlib.metadata import version

    return version("sampquery")


__version__ = _get_version()
