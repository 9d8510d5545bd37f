"""Tests for the TIFF directory reader and UserComment decoding.

This module tests:
- pnginfo_reader/exif/tiff.py
"""

from __future__ import annotations

import struct

import pytest

from pnginfo_reader.errors import OutOfBoundsError
from pnginfo_reader.exif.cursor import ByteCursor
from pnginfo_reader.exif.tiff import EXIF_TAGS, ROOT_TAGS, TiffDirectoryReader, decode_user_comment


class TestDecodeUserComment:
    def test_ascii_prefix(self):
        assert decode_user_comment(b"ASCII\x00\x00\x00Steps: 20") == "Steps: 20"

    def test_unicode_big_endian(self):
        blob = b"UNICODE\x00" + "a cat ❤".encode("utf-16-be")
        assert decode_user_comment(blob, little_endian=False) == "a cat ❤"

    def test_unicode_follows_tiff_byte_order(self):
        blob = b"UNICODE\x00" + "hello".encode("utf-16-le")
        assert decode_user_comment(blob, little_endian=True) == "hello"

    def test_unicode_bom_wins_over_byte_order(self):
        blob = b"UNICODE\x00" + "hello".encode("utf-16")  # BOM + native order
        assert decode_user_comment(blob, little_endian=False) == "hello"
        assert decode_user_comment(blob, little_endian=True) == "hello"

    def test_undefined_prefix_decodes_utf8(self):
        blob = b"\x00" * 8 + "café".encode("utf-8")
        assert decode_user_comment(blob) == "café"

    def test_trailing_nuls_dropped(self):
        assert decode_user_comment(b"ASCII\x00\x00\x00text\x00\x00") == "text"

    def test_short_blob_is_empty(self):
        assert decode_user_comment(b"ASCII") == ""
        assert decode_user_comment(b"") == ""

    def test_invalid_bytes_replaced(self):
        text = decode_user_comment(b"ASCII\x00\x00\x00ok\xff")
        assert text.startswith("ok")
        assert "�" in text


class TestTiffDirectoryReader:
    @pytest.mark.parametrize("little_endian", [True, False])
    def test_reads_pointer_and_comment(self, tiff_factory, little_endian):
        tiff = tiff_factory(b"ASCII\x00\x00\x00Steps: 20", little_endian=little_endian)
        reader = TiffDirectoryReader(ByteCursor(tiff), 0, little_endian)
        assert reader.read(8, ROOT_TAGS) == {"ExifIFDPointer": 26}
        assert reader.read(26, EXIF_TAGS) == {"UserComment": "Steps: 20"}

    def test_offsets_are_relative_to_tiff_start(self, tiff_factory):
        prefix = b"JUNKJUNK"
        tiff = tiff_factory(b"ASCII\x00\x00\x00shifted")
        reader = TiffDirectoryReader(ByteCursor(prefix + tiff), len(prefix), True)
        assert reader.read(len(prefix) + 26, EXIF_TAGS) == {"UserComment": "shifted"}

    def test_inline_undefined_value(self, tiff_factory):
        # count <= 4 is stored inline and is shorter than the prefix
        tiff = tiff_factory(b"abc")
        reader = TiffDirectoryReader(ByteCursor(tiff), 0, True)
        assert reader.read(26, EXIF_TAGS) == {"UserComment": ""}

    def test_unknown_tags_skipped(self, tiff_factory):
        tiff = tiff_factory(b"ASCII\x00\x00\x00x", with_pointer=False)
        reader = TiffDirectoryReader(ByteCursor(tiff), 0, True)
        assert reader.read(8, ROOT_TAGS) == {}

    def test_unsupported_type_leaves_tag_out(self, tiff_factory, caplog):
        # ASCII (type 2) is not decoded for UserComment
        tiff = tiff_factory(b"ASCII\x00\x00\x00text", comment_type=2)
        reader = TiffDirectoryReader(ByteCursor(tiff), 0, True)
        with caplog.at_level("DEBUG", logger="pnginfo_reader.exif.tiff"):
            assert reader.read(26, EXIF_TAGS) == {}
        assert "unsupported type" in caplog.text

    def test_long_with_count_above_one_not_decoded(self):
        ifd = struct.pack("<H", 1) + struct.pack("<HHII", 0x8769, 4, 2, 26) + struct.pack("<I", 0)
        reader = TiffDirectoryReader(ByteCursor(ifd), 0, True)
        assert reader.read(0, ROOT_TAGS) == {}

    def test_truncated_directory_raises(self):
        # Declares 3 entries but holds only one
        ifd = struct.pack("<H", 3) + struct.pack("<HHII", 0x8769, 4, 1, 26)
        reader = TiffDirectoryReader(ByteCursor(ifd), 0, True)
        with pytest.raises(OutOfBoundsError):
            reader.read(0, ROOT_TAGS)

    def test_value_offset_outside_buffer_raises(self):
        ifd = struct.pack("<H", 1) + struct.pack("<HHII", 0x9286, 7, 100, 5000) + struct.pack("<I", 0)
        reader = TiffDirectoryReader(ByteCursor(ifd), 0, True)
        with pytest.raises(OutOfBoundsError):
            reader.read(0, EXIF_TAGS)
