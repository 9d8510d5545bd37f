"""Minimal TIFF Image File Directory reader.

Only two value shapes are decoded because only two tags matter here:

* ``ExifIFDPointer`` (0x8769) in the root IFD, a LONG holding the offset of
  the Exif IFD;
* ``UserComment`` (0x9286) in the Exif IFD, an UNDEFINED blob whose first
  eight bytes name the character code of the text that follows.

Every other type/count combination is left undecoded and the tag is simply
absent from the result.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import OutOfBoundsError
from .cursor import ByteCursor

logger = logging.getLogger(__name__)

TYPE_LONG = 4
TYPE_UNDEFINED = 7

ENTRY_SIZE = 12
COMMENT_PREFIX_SIZE = 8

ROOT_TAGS: dict[int, str] = {0x8769: "ExifIFDPointer"}
EXIF_TAGS: dict[int, str] = {0x9286: "UserComment"}

_ASCII_PREFIX = b"ASCII\x00\x00\x00"
_UNICODE_PREFIX = b"UNICODE\x00"


def decode_user_comment(blob: bytes, little_endian: bool = False) -> str:
    """Decode a UserComment blob, including its 8-byte character code prefix.

    Args:
        blob (bytes): Raw tag value, prefix included.
        little_endian (bool): Byte order of the enclosing TIFF structure, used
            for UTF-16 text without a byte order mark.

    Returns:
        str: The comment text with trailing NULs removed. Blobs shorter than
            the prefix decode to an empty string.
    """
    if len(blob) < COMMENT_PREFIX_SIZE:
        return ""
    prefix = blob[:COMMENT_PREFIX_SIZE]
    payload = blob[COMMENT_PREFIX_SIZE:]
    if prefix == _UNICODE_PREFIX:
        if payload[:2] in (b"\xff\xfe", b"\xfe\xff"):
            text = payload.decode("utf-16", errors="replace")
        else:
            text = payload.decode("utf-16-le" if little_endian else "utf-16-be", errors="replace")
    elif prefix == _ASCII_PREFIX:
        text = payload.decode("ascii", errors="replace")
    else:
        text = payload.decode("utf-8", errors="replace")
    return text.rstrip("\x00")


class TiffDirectoryReader:
    """Walk one IFD of a TIFF structure and resolve the tags of interest.

    Offsets stored in entries are relative to ``tiff_start`` (the position of
    the ``II``/``MM`` byte order mark). All reads go through the
    :class:`ByteCursor`, so a directory that points outside the buffer raises
    ``OutOfBoundsError`` instead of returning garbage.
    """

    def __init__(self, cursor: ByteCursor, tiff_start: int, little_endian: bool):
        self.cursor = cursor
        self.tiff_start = tiff_start
        self.little_endian = little_endian

    def read(self, ifd_start: int, tag_table: dict[int, str]) -> dict[str, Any]:
        """Read the IFD at absolute offset ``ifd_start``.

        Args:
            ifd_start (int): Absolute buffer offset of the entry count.
            tag_table (dict[int, str]): Tag id to name mapping for this IFD.

        Returns:
            dict[str, Any]: Tag name to decoded value for known, decodable tags.
        """
        count = self.cursor.read_u16(ifd_start, self.little_endian)
        # The whole directory must fit before any entry is trusted.
        if not self.cursor.has(ifd_start + 2, count * ENTRY_SIZE):
            raise OutOfBoundsError(ifd_start + 2, count * ENTRY_SIZE, len(self.cursor))
        tags: dict[str, Any] = {}
        for index in range(count):
            entry = ifd_start + 2 + index * ENTRY_SIZE
            name = tag_table.get(self.cursor.read_u16(entry, self.little_endian))
            if name is None:
                continue
            value = self._read_value(entry)
            if value is None:
                logger.debug("[PNGInfo] Tag %s at offset %d has an unsupported type/count", name, entry)
                continue
            tags[name] = value
        return tags

    def _read_value(self, entry: int) -> Any:
        le = self.little_endian
        value_type = self.cursor.read_u16(entry + 2, le)
        count = self.cursor.read_u32(entry + 4, le)
        if value_type == TYPE_UNDEFINED:
            offset = self.tiff_start + self.cursor.read_u32(entry + 8, le) if count > 4 else entry + 8
            return decode_user_comment(self.cursor.read_bytes(offset, count), le)
        if value_type == TYPE_LONG and count == 1:
            return self.cursor.read_u32(entry + 8, le)
        return None


__all__ = [
    "ROOT_TAGS",
    "EXIF_TAGS",
    "TYPE_LONG",
    "TYPE_UNDEFINED",
    "TiffDirectoryReader",
    "decode_user_comment",
]
