"""Little-endian cursor over an in-memory buffer."""

from __future__ import annotations

import struct
from typing import Callable, TypeVar

from mapping_tables.errors import InvalidEncodingError, InvalidFormatError, TruncatedInputError

T = TypeVar("T")

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")


class ByteReader:
    """Reads fixed-width little-endian fields from a buffer.

    Each decoder gets the reader it should consume; the position is owned by
    the reader instance and never shared with a second buffer.
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def length(self) -> int:
        return len(self._data)

    @property
    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def _take(self, size: int) -> bytes:
        end = self._position + size
        if size < 0 or end > len(self._data):
            raise TruncatedInputError(size, self.remaining, self._position)
        chunk = self._data[self._position:end]
        self._position = end
        return chunk

    def _unpack(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self._take(fmt.size))[0]

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_bool(self) -> bool:
        return self.read_u8() != 0

    def read_bytes(self, size: int) -> bytes:
        """Read exactly size raw bytes."""
        return self._take(size)

    def read_uint(self, width: int) -> int:
        """Read an unsigned integer that is 1 or 2 bytes wide."""
        if width == 1:
            return self.read_u8()
        if width == 2:
            return self.read_u16()
        raise ValueError(f"Unsupported integer width: {width}")

    def read_utf8(self, size: int) -> str:
        """Read size bytes and decode them as UTF-8."""
        raw = self._take(size)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(
                f"Invalid UTF-8 string at offset {self._position - size}"
            ) from exc

    def read_fstring(self) -> str:
        """Read a length-prefixed engine string.

        A positive length counts UTF-8 bytes, a negative one counts UTF-16LE
        code units. Both include the terminator, which is stripped.
        """
        length = self.read_i32()
        if length == 0:
            return ""
        if length > 0:
            raw = self._take(length)
            encoding = "utf-8"
        else:
            raw = self._take(-length * 2)
            encoding = "utf-16-le"
        try:
            return raw.decode(encoding).rstrip("\x00")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(f"Invalid {encoding} string") from exc

    def read_array(self, read_item: Callable[[ByteReader], T]) -> list[T]:
        """Read an i32 element count followed by that many items."""
        count = self.read_i32()
        if count < 0:
            raise InvalidFormatError(f"Negative array length {count} at offset {self._position - 4}")
        return [read_item(self) for _ in range(count)]
