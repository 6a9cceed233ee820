class SAMPQueryError(Exception):
    """The base class for query errors."""


class AddressParseError(SAMPQueryError, ValueError):
    """Raised when a server address or port could not be parsed."""


class TransportError(SAMPQueryError):
    """Raised when sending or receiving a datagram fails.

    The underlying :py:exc:`OSError` is available as ``__cause__``.

    """


class TransportTimeout(TransportError, TimeoutError):
    """Raised when the server did not respond within the receive timeout."""


class SessionClosedError(SAMPQueryError):
    """Raised when a query is attempted on a closed session."""


class SettingsWriteError(SAMPQueryError):
    """Raised when a client preference could not be saved to its store."""
