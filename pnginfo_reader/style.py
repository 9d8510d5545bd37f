"""Style configuration threaded explicitly into the report builder.

The fragments are opaque markup: the builder only concatenates them around
text and never interprets them. ``plain()`` produces undecorated text (what
ComfyUI's text widgets expect); ``ansi()`` colors console output with the
codes registered on :class:`~pnginfo_reader.utils.color.cstr`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .utils.color import cstr

logger = logging.getLogger(__name__)

STYLE_ENV_VAR = "PNGINFO_STYLE"


@dataclass(frozen=True)
class StyleConfig:
    """Named markup fragments used by :class:`MetadataReportBuilder`.

    Attributes:
        header: Emitted before every report label.
        default: Resets styling after a label or a highlighted fragment.
        integer: Emitted before numeric values and style-reference weights.
        file: Emitted before model/file names.
        error: Emitted before the error message of an error report.
        line_break: Separator between report lines and between LoRA entries.
    """

    header: str = ""
    default: str = ""
    integer: str = ""
    file: str = ""
    error: str = ""
    line_break: str = "\n"

    @classmethod
    def plain(cls) -> StyleConfig:
        return cls()

    @classmethod
    def ansi(cls) -> StyleConfig:
        codes = cstr.color
        return cls(
            header=codes.BOLD + codes.LIGHTBEIGE,
            default=codes.END,
            integer=codes.LIGHTGREEN,
            file=codes.ORANGE,
            error=codes.RED,
        )

    @classmethod
    def from_env(cls) -> StyleConfig:
        """Return the preset named by ``PNGINFO_STYLE`` (``plain`` by default)."""
        name = os.environ.get(STYLE_ENV_VAR, "plain").strip().lower() or "plain"
        if name == "ansi":
            return cls.ansi()
        if name != "plain":
            logger.warning("[PNGInfo] Unknown %s=%r; using plain style", STYLE_ENV_VAR, name)
        return cls.plain()


__all__ = ["StyleConfig", "STYLE_ENV_VAR"]
