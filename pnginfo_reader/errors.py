"""Exception hierarchy for the PNGInfo reader.

Structural EXIF/TIFF problems derive from :class:`ExifStructureError` so the
extractor boundary can downgrade all of them to "no annotation" with a single
``except`` clause. Parser-level conditions have their own classes; none of
them is allowed to escape into the ComfyUI node.
"""

from __future__ import annotations


class PNGInfoError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class ExifStructureError(PNGInfoError):
    """A JPEG/EXIF/TIFF structure could not be walked."""


class OutOfBoundsError(ExifStructureError):
    """A read fell outside the byte buffer.

    Offsets inside TIFF directories come straight from the file, so a corrupt
    or hostile image ends up here rather than in an ``IndexError``.
    """

    def __init__(self, position: int, length: int, size: int):
        self.position = position
        self.length = length
        self.size = size
        super().__init__(f"read of {length} byte(s) at offset {position} outside buffer of {size} byte(s)")


class NotAJpegError(ExifStructureError):
    """The buffer does not start with the JPEG SOI marker (0xFFD8)."""


class MalformedMarkerError(ExifStructureError):
    """A JPEG segment header is broken (missing 0xFF or impossible length)."""


class NotExifError(ExifStructureError):
    """The APP1 payload does not carry the ``Exif`` identifier."""


class BadTiffHeaderError(ExifStructureError):
    """Byte order mark, magic number or first IFD offset is invalid."""


class NoAnnotationFoundError(PNGInfoError):
    """Neither a PNG text chunk nor an EXIF UserComment yielded text."""


class UnparsableSettingsLineError(PNGInfoError):
    """A settings line held no ``key: value`` segment (strict tokenizing only)."""


class AnnotationParseError(PNGInfoError):
    """An annotation variant could not be turned into a parsed report."""


__all__ = [
    "PNGInfoError",
    "ExifStructureError",
    "OutOfBoundsError",
    "NotAJpegError",
    "MalformedMarkerError",
    "NotExifError",
    "BadTiffHeaderError",
    "NoAnnotationFoundError",
    "UnparsableSettingsLineError",
    "AnnotationParseError",
]
