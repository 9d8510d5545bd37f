"""Locate the EXIF UserComment inside a JPEG byte stream.

The JPEG is walked segment by segment until the first APP1 (0xFFE1) segment.
Its payload must start with ``Exif\\0\\0``; the TIFF structure that follows is
read twice through :class:`TiffDirectoryReader`: once for the root IFD (to
find the Exif IFD pointer) and once for the Exif IFD itself (to find the
UserComment).

Every structural violation raises a subclass of ``ExifStructureError``.
:func:`extract_user_comment` is the boundary that turns those into ``None``
so that a corrupt image never breaks the caller.
"""

from __future__ import annotations

import logging

from ..errors import (
    BadTiffHeaderError,
    ExifStructureError,
    MalformedMarkerError,
    NotAJpegError,
    NotExifError,
)
from .cursor import ByteCursor
from .tiff import EXIF_TAGS, ROOT_TAGS, TiffDirectoryReader

logger = logging.getLogger(__name__)

SOI = 0xFFD8
MARKER_PREFIX = 0xFF
APP1 = 0xE1
SOS = 0xDA
EOI = 0xD9

EXIF_IDENTIFIER = b"Exif"
EXIF_HEADER_SIZE = 6  # "Exif\0\0"
TIFF_MAGIC = 42
LITTLE_ENDIAN_MARK = 0x4949  # "II"
BIG_ENDIAN_MARK = 0x4D4D  # "MM"
MIN_FIRST_IFD_OFFSET = 8


class ExifExtractor:
    """Pull the UserComment string out of one JPEG buffer.

    Instances are single-use and hold no state beyond their own buffer, so
    concurrent loads never share a cursor.
    """

    def __init__(self, data: bytes):
        self.cursor = ByteCursor(data)

    def extract(self) -> str | None:
        """Return the UserComment text, or None when the JPEG carries none.

        Raises:
            ExifStructureError: On any structural violation of the JPEG,
                EXIF or TIFF layers (``OutOfBoundsError`` included).
        """
        payload = self.find_exif_payload()
        if payload is None:
            logger.debug("[PNGInfo] No APP1 segment before image data")
            return None
        return self.read_user_comment(payload)

    def find_exif_payload(self) -> int | None:
        """Return the absolute offset of the first APP1 payload, if any.

        The offset points just past the segment's 2-byte length field.
        """
        cursor = self.cursor
        if len(cursor) < 2 or cursor.read_u16(0) != SOI:
            raise NotAJpegError("buffer does not start with the JPEG SOI marker")

        offset = 2
        size = len(cursor)
        while offset < size:
            prefix = cursor.read_u8(offset)
            if prefix != MARKER_PREFIX:
                raise MalformedMarkerError(f"expected 0xFF at offset {offset}, found 0x{prefix:02X}")
            marker = cursor.read_u8(offset + 1)
            if marker in (SOS, EOI):
                return None
            length = cursor.read_u16(offset + 2)
            if length < 2:
                raise MalformedMarkerError(f"segment 0xFF{marker:02X} at offset {offset} declares length {length}")
            if marker == APP1:
                logger.debug("[PNGInfo] Found APP1 segment at offset %d (length %d)", offset, length)
                return offset + 4
            offset += 2 + length
        return None

    def read_user_comment(self, start: int) -> str | None:
        """Decode the EXIF payload starting at ``start``."""
        cursor = self.cursor
        identifier = cursor.read_bytes(start, len(EXIF_IDENTIFIER))
        if identifier != EXIF_IDENTIFIER:
            raise NotExifError(f"APP1 payload starts with {identifier!r}, not {EXIF_IDENTIFIER!r}")

        tiff_start = start + EXIF_HEADER_SIZE
        byte_order = cursor.read_u16(tiff_start)
        if byte_order == LITTLE_ENDIAN_MARK:
            little_endian = True
        elif byte_order == BIG_ENDIAN_MARK:
            little_endian = False
        else:
            raise BadTiffHeaderError(f"unknown TIFF byte order mark 0x{byte_order:04X}")

        if cursor.read_u16(tiff_start + 2, little_endian) != TIFF_MAGIC:
            raise BadTiffHeaderError("TIFF magic number 42 missing")

        first_ifd = cursor.read_u32(tiff_start + 4, little_endian)
        if first_ifd < MIN_FIRST_IFD_OFFSET:
            raise BadTiffHeaderError(f"first IFD offset {first_ifd} is inside the TIFF header")

        reader = TiffDirectoryReader(cursor, tiff_start, little_endian)
        root = reader.read(tiff_start + first_ifd, ROOT_TAGS)
        pointer = root.get("ExifIFDPointer")
        if not isinstance(pointer, int) or not pointer:
            logger.debug("[PNGInfo] Root IFD has no Exif IFD pointer")
            return None
        exif = reader.read(tiff_start + pointer, EXIF_TAGS)
        comment = exif.get("UserComment")
        return comment if isinstance(comment, str) else None


def extract_user_comment(data: bytes) -> str | None:
    """Return the JPEG's UserComment text or None, never raising on bad input.

    Args:
        data (bytes): Complete JPEG file contents.

    Returns:
        str | None: The decoded comment, or None when the buffer is not a
            JPEG, carries no EXIF UserComment, or is structurally corrupt.
    """
    try:
        return ExifExtractor(data).extract()
    except ExifStructureError as err:
        logger.debug("[PNGInfo] EXIF extraction abandoned: %s: %s", type(err).__name__, err)
        return None


__all__ = ["ExifExtractor", "extract_user_comment"]
