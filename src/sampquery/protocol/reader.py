"""A bounded cursor over the body of a query response."""
from typing import Literal

from .errors import MalformedResponseError

__all__ = ("PacketReader",)


class PacketReader:
    """Reads little-endian fields from a byte string.

    Every read checks the number of remaining bytes before consuming
    anything, so a length prefix pointing past the end of the buffer
    raises :py:exc:`MalformedResponseError` instead of silently returning
    a shorter field.

    :param data: The bytes to read from.
    :param offset: The position to start reading at.

    """

    __slots__ = ("data", "offset")

    def __init__(self, data: bytes, offset: int = 0):
        if offset not in range(len(data) + 1):
            raise ValueError(f"offset must be within 0-{len(data)}, not {offset!r}")

        self.data = data
        self.offset = offset

    def __repr__(self):
        return "<{} offset={} remaining={}>".format(
            type(self).__name__, self.offset, self.remaining
        )

    @property
    def remaining(self) -> int:
        """The number of bytes that have not been read yet."""
        return len(self.data) - self.offset

    def read_bytes(self, n: int) -> bytes:
        """Reads exactly ``n`` bytes.

        :raises MalformedResponseError:
            Fewer than ``n`` bytes are left in the buffer.

        """
        if n < 0:
            raise MalformedResponseError(f"negative field length: {n}")
        elif n > self.remaining:
            raise MalformedResponseError(
                f"field of {n} byte(s) at offset {self.offset} exceeds "
                f"the {self.remaining} byte(s) remaining"
            )

        start = self.offset
        self.offset += n
        return self.data[start : self.offset]

    def read_int(self, size: int) -> int:
        """Reads an unsigned little-endian integer of the given byte size."""
        return int.from_bytes(self.read_bytes(size), "little")

    def read_u8(self) -> int:
        return self.read_int(1)

    def read_u16(self) -> int:
        return self.read_int(2)

    def read_u32(self) -> int:
        return self.read_int(4)

    def read_bool(self) -> bool:
        return self.read_u8() != 0

    def read_string(self, prefix_size: Literal[1, 2, 4], encoding: str) -> str:
        """Reads a string prefixed by its length in bytes.

        Bytes that cannot be decoded are replaced with U+FFFD.

        :param prefix_size: The size of the length prefix in bytes.
        :param encoding: The codec used to decode the string.

        """
        length = self.read_int(prefix_size)
        return self.read_bytes(length).decode(encoding, errors="replace")
