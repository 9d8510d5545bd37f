"""ComfyUI node that reads the generation metadata of an input image.

The node lists the files of ComfyUI's input directory (with upload support),
runs the PNG/JPEG metadata pipeline on the selected file and returns the
rendered report together with the raw prompt and settings strings so they can
be wired into other nodes.

Logging Policy:
    Module-level logger only; the node never raises on unreadable metadata,
    it returns the error report text instead.
"""

from __future__ import annotations

import hashlib
import logging
import os

from ..reader import ImageMetadataLoader
from ..style import StyleConfig
from ..utils.color import cstr
from ..utils.text import no_escape

logger = logging.getLogger(__name__)


def _input_directory() -> str | None:
    """Return ComfyUI's input directory, or None outside a ComfyUI runtime."""
    try:
        import folder_paths
    except ModuleNotFoundError:
        return None
    return folder_paths.get_input_directory()


def _resolve_image_path(image: str) -> str:
    """Map a widget value (possibly annotated, e.g. ``x.png [input]``) to a path."""
    try:
        import folder_paths
    except ModuleNotFoundError:
        return image
    return folder_paths.get_annotated_filepath(image)


def _list_input_files() -> list[str]:
    input_dir = _input_directory()
    if not input_dir or not os.path.isdir(input_dir):
        return []
    return sorted(f for f in os.listdir(input_dir) if os.path.isfile(os.path.join(input_dir, f)))


class PNGInfoReader:
    """Read prompts and generation settings embedded in a PNG or JPEG image.

    Outputs:
        info (STRING): The full report, one entry per line.
        positive (STRING): Positive prompt with style references removed.
        negative (STRING): Negative prompt (empty when absent).
        settings (STRING): ``key: value`` lines from the settings line.
    """

    @classmethod
    def INPUT_TYPES(cls):  # noqa: N802
        return {
            "required": {
                "image": (
                    _list_input_files(),
                    {"image_upload": True, "tooltip": "PNG or JPEG image carrying generation metadata."},
                ),
            },
        }

    RETURN_TYPES = ("STRING", "STRING", "STRING", "STRING")
    RETURN_NAMES = ("info", "positive", "negative", "settings")
    FUNCTION = "read"
    OUTPUT_NODE = True
    CATEGORY = "PNGInfoReader"
    DESCRIPTION = "Show the prompts, LoRAs and sampler settings stored in an image."

    def read(self, image):
        """Run the metadata pipeline on ``image``.

        Args:
            image (str): File name from the input directory widget.

        Returns:
            dict: UI payload with the report text and the four string outputs.
        """
        path = _resolve_image_path(image)
        style = StyleConfig.plain()
        with ImageMetadataLoader(style=style, escape=no_escape) as loader:
            loaded = loader.load(path)
        info = loaded.report.render(style)

        positive = negative = settings = ""
        if loaded.parsed is not None:
            positive, negative = loaded.parsed.positive, loaded.parsed.negative
            settings = "\n".join(f"{key}: {value}" for key, value in loaded.parsed.settings_dict().items())

        if loaded.report.is_error:
            logger.info(cstr("[PNGInfo] %s: %s").msg, os.path.basename(path), loaded.report.error)
        else:
            logger.debug("[PNGInfo] %s: %d report entries", os.path.basename(path), len(loaded.report))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("[PNGInfo] Report preview:\n%s", loaded.report.render(StyleConfig.from_env()))
        return {"ui": {"text": [info]}, "result": (info, positive, negative, settings)}

    @classmethod
    def IS_CHANGED(cls, image):  # noqa: N802
        """Hash the file contents so edits to the image re-run the node."""
        path = _resolve_image_path(image)
        digest = hashlib.sha256()
        with open(path, "rb") as fh:
            for chunk in iter(lambda: fh.read(1 << 16), b""):
                digest.update(chunk)
        return digest.hexdigest()

    @classmethod
    def VALIDATE_INPUTS(cls, image):  # noqa: N802
        if not os.path.isfile(_resolve_image_path(image)):
            return f"Invalid image file: {image}"
        return True
