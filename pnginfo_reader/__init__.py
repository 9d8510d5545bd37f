"""Read generation metadata (prompts, LoRAs, sampler settings) from images.

PNG files carry the annotation in a text chunk, JPEG files in the EXIF
UserComment tag. The annotation is parsed into prompts, style references and
settings and assembled into an ordered, styled report. The ComfyUI nodes in
:mod:`pnginfo_reader.nodes` expose the same pipeline inside a workflow.

Environment flags are listed in ``PNGINFO_ENV_FLAGS``; downstream modules
re-read ``os.environ`` at call time, so they can be changed after import.
"""
PNGINFO_ENV_FLAGS = {
    "PNGINFO_DEBUG": False,  # Log every parse step at DEBUG level
    "PNGINFO_TEST_MODE": False,  # Skip ComfyUI node registration on import
    "PNGINFO_STYLE": "plain",  # Report style for console previews: plain | ansi
    "PNGINFO_VERSION_OVERRIDE": "",  # Force the reported package version
}

from .errors import (  # noqa: E402
    AnnotationParseError,
    BadTiffHeaderError,
    ExifStructureError,
    MalformedMarkerError,
    NoAnnotationFoundError,
    NotAJpegError,
    NotExifError,
    OutOfBoundsError,
    PNGInfoError,
    UnparsableSettingsLineError,
)
from .exif import ExifExtractor, extract_user_comment  # noqa: E402
from .parsers import GenerationParameters, GenerationTextParser, SettingEntry, tokenize_parameters  # noqa: E402
from .parsers.annotation import build_report  # noqa: E402
from .reader import ImageMetadataLoader, read_metadata, read_metadata_file  # noqa: E402
from .report import NO_METADATA_MESSAGE, MetadataReport, MetadataReportBuilder  # noqa: E402
from .style import StyleConfig  # noqa: E402

__all__ = [
    "PNGINFO_ENV_FLAGS",
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
    "ExifExtractor",
    "extract_user_comment",
    "GenerationParameters",
    "GenerationTextParser",
    "SettingEntry",
    "tokenize_parameters",
    "build_report",
    "ImageMetadataLoader",
    "read_metadata",
    "read_metadata_file",
    "NO_METADATA_MESSAGE",
    "MetadataReport",
    "MetadataReportBuilder",
    "StyleConfig",
]
