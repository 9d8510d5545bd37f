"""Bounds-checked, read-only view over a byte buffer."""

from __future__ import annotations

import struct

from ..errors import OutOfBoundsError

_U16 = {True: struct.Struct("<H"), False: struct.Struct(">H")}
_U32 = {True: struct.Struct("<I"), False: struct.Struct(">I")}


class ByteCursor:
    """Read unsigned integers at absolute offsets of an immutable buffer.

    ``start`` is the lowest offset the cursor will read from; anything before
    it, or running past the end of the buffer, raises
    :class:`~pnginfo_reader.errors.OutOfBoundsError`. Every multi-byte read
    takes an explicit endianness flag because JPEG segment lengths are always
    big-endian while the embedded TIFF structure declares its own byte order.
    """

    __slots__ = ("_data", "start")

    def __init__(self, data: bytes, start: int = 0):
        if start < 0 or start > len(data):
            raise OutOfBoundsError(start, 0, len(data))
        self._data = bytes(data)
        self.start = start

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, position: int, length: int) -> None:
        if position < self.start or length < 0 or position + length > len(self._data):
            raise OutOfBoundsError(position, length, len(self._data))

    def read_u8(self, position: int) -> int:
        self._check(position, 1)
        return self._data[position]

    def read_u16(self, position: int, little_endian: bool = False) -> int:
        self._check(position, 2)
        return _U16[bool(little_endian)].unpack_from(self._data, position)[0]

    def read_u32(self, position: int, little_endian: bool = False) -> int:
        self._check(position, 4)
        return _U32[bool(little_endian)].unpack_from(self._data, position)[0]

    def read_bytes(self, position: int, length: int) -> bytes:
        self._check(position, length)
        return self._data[position : position + length]

    def has(self, position: int, length: int = 1) -> bool:
        """Return True when ``length`` bytes at ``position`` can be read."""
        return position >= self.start and length >= 0 and position + length <= len(self._data)
