import io
import os
import struct
import sys
import zlib

# Skip ComfyUI node registration if the root package is imported during tests.
os.environ.setdefault("PNGINFO_TEST_MODE", "1")

import piexif  # noqa: E402
import piexif.helper  # noqa: E402
import pytest  # noqa: E402
from PIL import Image  # noqa: E402
from PIL.PngImagePlugin import PngInfo  # noqa: E402

# Ensure package root is on sys.path for absolute imports when pytest alters CWD.
_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

SAMPLE_PARAMETERS = (
    "a cat, <lora:bestlora:0.8>\n"
    "Negative prompt: blurry\n"
    'Steps: 30, Sampler: "Euler a, fast", CFG scale: 7, Seed: 1234, Model: "realisticVision"'
)

# Segment placed before APP1 so the walker has something to skip.
_APP0_JFIF = b"\xff\xe0" + struct.pack(">H", 16) + b"JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
_SOS_TAIL = b"\xff\xda" + struct.pack(">H", 2) + b"\x00\x00\xff\xd9"


def build_tiff(comment_blob, little_endian=True, comment_type=7, with_pointer=True):
    """Hand-assemble a TIFF structure: header, root IFD, Exif IFD, comment data.

    Layout (offsets relative to the byte order mark):
        0   header (8 bytes, first IFD at 8)
        8   root IFD with one ExifIFDPointer entry (18 bytes)
        26  Exif IFD with one UserComment entry (18 bytes)
        44  comment data when it does not fit inline
    """
    e = "<" if little_endian else ">"
    header = (b"II" if little_endian else b"MM") + struct.pack(e + "HI", 42, 8)
    if with_pointer:
        root = struct.pack(e + "H", 1) + struct.pack(e + "HHII", 0x8769, 4, 1, 26) + struct.pack(e + "I", 0)
    else:
        # Unrelated ImageWidth tag keeps the IFD the same size.
        root = struct.pack(e + "H", 1) + struct.pack(e + "HHII", 0x0100, 4, 1, 64) + struct.pack(e + "I", 0)
    count = len(comment_blob)
    if count > 4:
        value = struct.pack(e + "I", 44)
        data = comment_blob
    else:
        value = comment_blob.ljust(4, b"\x00")
        data = b""
    exif = struct.pack(e + "H", 1) + struct.pack(e + "HHI", 0x9286, comment_type, count) + value + struct.pack(e + "I", 0)
    return header + root + exif + data


def wrap_app1(payload):
    """Wrap an APP1 payload into a minimal JPEG stream (SOI, APP0, APP1, SOS, EOI)."""
    return b"\xff\xd8" + _APP0_JFIF + b"\xff\xe1" + struct.pack(">H", 2 + len(payload)) + payload + _SOS_TAIL


def build_exif_jpeg(comment_blob, little_endian=True, **kwargs):
    return wrap_app1(b"Exif\x00\x00" + build_tiff(comment_blob, little_endian=little_endian, **kwargs))


def unicode_comment(text, little_endian=False):
    return b"UNICODE\x00" + text.encode("utf-16-le" if little_endian else "utf-16-be")


def make_jpeg_bytes(comment=None, encoding="unicode", size=(16, 16)):
    """Encode a real JPEG with Pillow; the UserComment is written by piexif."""
    buf = io.BytesIO()
    img = Image.new("RGB", size, (120, 60, 200))
    if comment is None:
        img.save(buf, format="JPEG")
    else:
        exif_bytes = piexif.dump(
            {
                "0th": {},
                "Exif": {piexif.ExifIFD.UserComment: piexif.helper.UserComment.dump(comment, encoding=encoding)},
            }
        )
        img.save(buf, format="JPEG", exif=exif_bytes)
    return buf.getvalue()


def make_png_bytes(text_chunks=None, size=(16, 16)):
    buf = io.BytesIO()
    img = Image.new("RGB", size, (10, 200, 30))
    pnginfo = None
    if text_chunks:
        pnginfo = PngInfo()
        for key, value in text_chunks.items():
            pnginfo.add_text(key, value)
    img.save(buf, format="PNG", pnginfo=pnginfo)
    return buf.getvalue()


# Larger than twice Image.MAX_IMAGE_PIXELS, so Pillow refuses to open it.
OVERSIZED_DIMENSION = 20000


def _png_chunk(kind, data):
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)


def make_oversized_png(parameters="a cat\nSteps: 20"):
    """Hand-assemble a PNG whose IHDR claims a huge size; only the header is valid."""
    ihdr = struct.pack(">IIBBBBB", OVERSIZED_DIMENSION, OVERSIZED_DIMENSION, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", ihdr)
        + _png_chunk(b"tEXt", b"parameters\x00" + parameters.encode("latin-1"))
        + _png_chunk(b"IDAT", zlib.compress(b"\x00" * 16))
        + _png_chunk(b"IEND", b"")
    )


def make_oversized_jpeg(parameters="a cat\nSteps: 20"):
    """A JPEG whose SOF0 frame claims a huge size, with the comment in EXIF."""
    tiff = build_tiff(unicode_comment(parameters, little_endian=True), little_endian=True)
    app1 = b"Exif\x00\x00" + tiff
    sof0 = b"\xff\xc0" + struct.pack(">HBHHB", 11, 8, OVERSIZED_DIMENSION, OVERSIZED_DIMENSION, 1) + b"\x01\x11\x00"
    return b"\xff\xd8" + _APP0_JFIF + b"\xff\xe1" + struct.pack(">H", 2 + len(app1)) + app1 + sof0 + _SOS_TAIL


@pytest.fixture
def sample_parameters():
    return SAMPLE_PARAMETERS


@pytest.fixture
def jpeg_factory():
    return make_jpeg_bytes


@pytest.fixture
def png_factory():
    return make_png_bytes


@pytest.fixture
def exif_jpeg_factory():
    return build_exif_jpeg


@pytest.fixture
def tiff_factory():
    return build_tiff


@pytest.fixture
def app1_wrapper():
    return wrap_app1


@pytest.fixture
def unicode_blob():
    return unicode_comment


@pytest.fixture
def image_file(tmp_path):
    """Write image bytes to ``tmp_path`` and return the path."""

    def _write(name, data):
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture(autouse=True)
def _clear_pnginfo_env(monkeypatch):
    for flag in ("PNGINFO_DEBUG", "PNGINFO_STYLE", "PNGINFO_VERSION_OVERRIDE"):
        monkeypatch.delenv(flag, raising=False)


@pytest.fixture
def oversized_png():
    return make_oversized_png()


@pytest.fixture
def oversized_jpeg():
    return make_oversized_jpeg()
