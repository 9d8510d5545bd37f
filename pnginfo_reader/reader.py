"""File-load boundary: bytes in, :class:`MetadataReport` out.

PNG text chunks come from Pillow; JPEG annotations come from the EXIF
UserComment via :mod:`pnginfo_reader.exif`. Either way the result is a
``{"parameters": ..., "prompt": ...}`` style mapping handed to
:func:`~pnginfo_reader.parsers.annotation.build_report`.

:class:`ImageMetadataLoader` mirrors a viewer session: it keeps the preview
image of the current file open and releases it before the next load.
"""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field

from PIL import Image, UnidentifiedImageError

from .exif import extract_user_comment
from .parsers.annotation import PARAMETERS_KEY, GraphParser, build_report
from .parsers.generation import GenerationParameters
from .report import UNSUPPORTED_FORMAT_MESSAGE, MetadataReport, MetadataReportBuilder
from .style import StyleConfig
from .utils.text import escape_html

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8"

FORMAT_PNG = "png"
FORMAT_JPEG = "jpeg"
SUPPORTED_FORMATS = (FORMAT_PNG, FORMAT_JPEG)

# Everything Image.open raises for a corrupt, truncated or oversized file.
PILLOW_OPEN_ERRORS = (Image.DecompressionBombError, UnidentifiedImageError, OSError, SyntaxError, ValueError)


def detect_image_format(data: bytes) -> str | None:
    """Return ``"png"``, ``"jpeg"`` or None from the file signature."""
    if data.startswith(PNG_SIGNATURE):
        return FORMAT_PNG
    if data.startswith(JPEG_SIGNATURE):
        return FORMAT_JPEG
    return None


def read_png_chunks(data: bytes) -> dict[str, str]:
    """Return the tEXt/iTXt/zTXt chunks of a PNG as a ``key -> text`` mapping.

    Unreadable PNGs yield an empty mapping; the caller then reports
    "no metadata". Images above Pillow's pixel limit are refused before any
    chunk is read, so they end up the same way.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            text = getattr(img, "text", None) or {}
            return {str(k): v for k, v in text.items() if isinstance(v, str)}
    except Image.DecompressionBombError as err:
        logger.warning("[PNGInfo] PNG refused by Pillow's size limit: %s", err)
        return {}
    except PILLOW_OPEN_ERRORS as err:
        logger.debug("[PNGInfo] Could not read PNG text chunks: %s", err)
        return {}


def read_chunks(data: bytes) -> dict[str, str]:
    """Return annotation chunks for a PNG or JPEG buffer (empty when none)."""
    kind = detect_image_format(data)
    if kind == FORMAT_PNG:
        return read_png_chunks(data)
    if kind == FORMAT_JPEG:
        comment = extract_user_comment(data)
        return {PARAMETERS_KEY: comment} if comment else {}
    return {}


def read_metadata(
    data: bytes,
    style: StyleConfig | None = None,
    escape: Callable[[str], str] = escape_html,
    graph_parser: GraphParser | None = None,
) -> MetadataReport:
    """Build the metadata report for the image bytes in ``data``."""
    if detect_image_format(data) not in SUPPORTED_FORMATS:
        logger.warning("[PNGInfo] %s", UNSUPPORTED_FORMAT_MESSAGE)
        return MetadataReportBuilder.error(UNSUPPORTED_FORMAT_MESSAGE)
    return build_report(read_chunks(data), style=style, escape=escape, graph_parser=graph_parser)


def read_metadata_file(path: str | os.PathLike, **kwargs) -> MetadataReport:
    with open(path, "rb") as fh:
        return read_metadata(fh.read(), **kwargs)


@dataclass
class LoadedImage:
    """Result of one :meth:`ImageMetadataLoader.load` call.

    ``parsed`` is the annotation that produced ``report``, or None when the
    report is an error.
    """

    path: str
    format: str | None
    report: MetadataReport
    chunks: dict[str, str] = field(default_factory=dict)
    size: tuple[int, int] | None = None
    parsed: GenerationParameters | None = None

    @property
    def parameters(self) -> str:
        return self.chunks.get(PARAMETERS_KEY, "")


class ImageMetadataLoader:
    """Load images one after another, owning the preview of the current one.

    Use as a context manager so the last preview is released::

        with ImageMetadataLoader(style=StyleConfig.ansi()) as loader:
            loaded = loader.load("photo.jpg")
            print(loaded.report.render(loader.style))

    Args:
        style: Markup fragments for the report.
        escape: Escaper for annotation text.
        graph_parser: Optional ComfyUI graph parser for ``prompt`` chunks.
    """

    def __init__(
        self,
        style: StyleConfig | None = None,
        escape: Callable[[str], str] = escape_html,
        graph_parser: GraphParser | None = None,
    ):
        self.style = style if style is not None else StyleConfig.plain()
        self.escape = escape
        self.graph_parser = graph_parser
        self.preview: Image.Image | None = None

    def __enter__(self) -> ImageMetadataLoader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release the preview image of the previous load, if any."""
        if self.preview is not None:
            self.preview.close()
            self.preview = None

    def load(self, path: str | os.PathLike) -> LoadedImage:
        self.close()
        path = os.fspath(path)
        with open(path, "rb") as fh:
            data = fh.read()

        kind = detect_image_format(data)
        if kind not in SUPPORTED_FORMATS:
            logger.warning("[PNGInfo] %s: %s", UNSUPPORTED_FORMAT_MESSAGE, path)
            return LoadedImage(path, kind, MetadataReportBuilder.error(UNSUPPORTED_FORMAT_MESSAGE))

        try:
            self.preview = Image.open(io.BytesIO(data))
            self.preview.load()
        except PILLOW_OPEN_ERRORS as err:
            # The metadata is still worth showing when pixel data is broken.
            logger.warning("[PNGInfo] Could not open preview for %s: %s", path, err)
            self.close()

        chunks = read_chunks(data)
        report = build_report(chunks, style=self.style, escape=self.escape, graph_parser=self.graph_parser)
        size = tuple(self.preview.size) if self.preview is not None else None
        logger.debug("[PNGInfo] Loaded %s (%s, size=%s, %d report entries)", path, kind, size, len(report))
        return LoadedImage(path, kind, report, chunks, size, report.parsed)


__all__ = [
    "FORMAT_PNG",
    "FORMAT_JPEG",
    "detect_image_format",
    "read_png_chunks",
    "read_chunks",
    "read_metadata",
    "read_metadata_file",
    "LoadedImage",
    "ImageMetadataLoader",
]
