"""JPEG/EXIF/TIFF decoding limited to the UserComment tag."""

from .cursor import ByteCursor
from .extractor import ExifExtractor, extract_user_comment
from .tiff import EXIF_TAGS, ROOT_TAGS, TiffDirectoryReader, decode_user_comment

__all__ = [
    "ByteCursor",
    "ExifExtractor",
    "TiffDirectoryReader",
    "ROOT_TAGS",
    "EXIF_TAGS",
    "decode_user_comment",
    "extract_user_comment",
]
