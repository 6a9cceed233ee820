"""Reads and writes the preferences saved by the SA-MP client.

The Windows client keeps these under ``HKEY_CURRENT_USER\\Software\\SAMP``,
which :py:class:`RegistryStore` provides access to. Other stores can be
used by implementing the :py:class:`SettingsStore` protocol.

"""
import logging
import sys
from typing import Any, Protocol

from .errors import SettingsWriteError

__all__ = (
    "ClientSettings",
    "MemoryStore",
    "RegistryStore",
    "SettingsStore",
)

log = logging.getLogger(__name__)

PLAYER_NAME = "PlayerName"
GAME_EXECUTABLE = "gta_sa_exe"
SAVE_RCON_PASSWORDS = "SaveRconPasses"
SAVE_SERVER_PASSWORDS = "SaveServPasses"


class SettingsStore(Protocol):
    """A key/value store holding the client's preferences."""

    def get(self, key: str) -> Any | None:
        """Returns the value of the given key or ``None`` if it is not set."""
        raise NotImplementedError

    def set(self, key: str, value: Any) -> bool:
        """Stores a value under the given key.

        :returns: ``True`` if the value was written, ``False`` otherwise.

        """
        raise NotImplementedError


class MemoryStore:
    """A store that keeps values in a dictionary."""

    def __init__(self, values: dict[str, Any] | None = None):
        self.values = dict(values or {})

    def get(self, key: str) -> Any | None:
        return self.values.get(key)

    def set(self, key: str, value: Any) -> bool:
        self.values[key] = value
        return True


class RegistryStore:
    """A store backed by the Windows registry.

    Strings are written as ``REG_SZ`` and booleans as ``REG_DWORD``.

    :param path: The subkey of ``HKEY_CURRENT_USER`` holding the values.
    :raises OSError: The store was created on a platform other than Windows.

    """

    def __init__(self, path: str = r"Software\SAMP"):
        if sys.platform != "win32":
            raise OSError("the registry is only available on Windows")

        import winreg

        self._winreg = winreg
        self.path = path

    def get(self, key: str) -> Any | None:
        winreg = self._winreg
        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, self.path) as handle:
                value, _ = winreg.QueryValueEx(handle, key)
        except FileNotFoundError:
            return None
        return value

    def set(self, key: str, value: Any) -> bool:
        winreg = self._winreg
        if isinstance(value, bool):
            kind, value = winreg.REG_DWORD, int(value)
        elif isinstance(value, int):
            kind = winreg.REG_DWORD
        else:
            kind, value = winreg.REG_SZ, str(value)

        try:
            with winreg.CreateKey(winreg.HKEY_CURRENT_USER, self.path) as handle:
                winreg.SetValueEx(handle, key, 0, kind, value)
        except OSError:
            log.warning(f"could not write {key!r} to the registry", exc_info=True)
            return False
        return True


class ClientSettings:
    """Provides access to the SA-MP client's preferences.

    Assigning to a property raises :py:exc:`SettingsWriteError` if the
    store reports that the value could not be written.

    :param store:
        The store to read and write values from.
        Defaults to a :py:class:`RegistryStore`.

    """

    def __init__(self, store: SettingsStore | None = None):
        if store is None:
            store = RegistryStore()
        self.store = store

    def __repr__(self):
        return "<{} store={!r}>".format(type(self).__name__, self.store)

    def _get_bool(self, key: str) -> bool | None:
        value = self.store.get(key)
        if value is None:
            return None
        return bool(value)

    def _set(self, key: str, value: Any) -> None:
        if not self.store.set(key, value):
            raise SettingsWriteError(f"failed to save {key!r}")

    @property
    def player_name(self) -> str | None:
        """The nickname used when joining servers."""
        return self.store.get(PLAYER_NAME)

    @player_name.setter
    def player_name(self, value: str) -> None:
        self._set(PLAYER_NAME, value)

    @property
    def game_executable(self) -> str | None:
        """The path to the game executable launched by the client."""
        return self.store.get(GAME_EXECUTABLE)

    @game_executable.setter
    def game_executable(self, value: str) -> None:
        self._set(GAME_EXECUTABLE, value)

    @property
    def save_rcon_passwords(self) -> bool | None:
        """Whether the client remembers RCON passwords."""
        return self._get_bool(SAVE_RCON_PASSWORDS)

    @save_rcon_passwords.setter
    def save_rcon_passwords(self, value: bool) -> None:
        self._set(SAVE_RCON_PASSWORDS, value)

    @property
    def save_server_passwords(self) -> bool | None:
        """Whether the client remembers server passwords."""
        return self._get_bool(SAVE_SERVER_PASSWORDS)

    @save_server_passwords.setter
    def save_server_passwords(self, value: bool) -> None:
        self._set(SAVE_SERVER_PASSWORDS, value)
