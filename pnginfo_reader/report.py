"""Assemble the ordered, styled metadata report.

The report is an ordered list of ``(label, value)`` entries:

1. ``Prompt``
2. ``Negative Prompt`` (only when non-empty)
3. ``LoRA`` (only when style references were found)
4. every setting key, in order of first appearance, last value wins

An error report holds exactly one ``Error`` entry and nothing else.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .parsers.generation import GenerationParameters, format_setting_value, format_style_ref
from .style import StyleConfig
from .utils.text import escape_html

logger = logging.getLogger(__name__)

ERROR_LABEL = "Error"
PROMPT_LABEL = "Prompt"
NEGATIVE_LABEL = "Negative Prompt"
LORA_LABEL = "LoRA"

NO_METADATA_MESSAGE = "No parameters or prompt sections in metadata"
PARAMETERS_ERROR_MESSAGE = "Error in parameters section"
PROMPT_ERROR_MESSAGE = "Error in prompt section"
UNSUPPORTED_FORMAT_MESSAGE = "Unsupported file format"

KIND_SECTION = "section"
KIND_SETTING = "setting"
KIND_ERROR = "error"


@dataclass(frozen=True)
class ReportEntry:
    label: str
    value: str
    kind: str = KIND_SETTING


@dataclass
class MetadataReport:
    """Ordered report entries ready for a presentation layer.

    ``parsed`` holds the parameters the entries were built from (None for an
    error report) so callers never need to parse the annotation again.
    """

    entries: list[ReportEntry] = field(default_factory=list)
    parsed: GenerationParameters | None = field(default=None, compare=False, repr=False)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return ((entry.label, entry.value) for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_error(self) -> bool:
        return len(self.entries) == 1 and self.entries[0].kind == KIND_ERROR

    @property
    def error(self) -> str | None:
        return self.entries[0].value if self.is_error else None

    def as_dict(self) -> dict[str, str]:
        return dict(self)

    def render(self, style: StyleConfig) -> str:
        """Join the entries into one display string.

        Sections put their value on the next line, settings follow their key
        on the same line, and the error entry shows only its message.
        """
        lines = []
        for entry in self.entries:
            if entry.kind == KIND_ERROR:
                lines.append(f"{style.error}{entry.value}{style.default}")
            elif entry.kind == KIND_SECTION:
                lines.append(f"{style.header}{entry.label}:{style.default}{style.line_break}{entry.value}")
            else:
                lines.append(f"{style.header}{entry.label}: {style.default}{entry.value}{style.default}")
        return style.line_break.join(lines)


class MetadataReportBuilder:
    """Build :class:`MetadataReport` objects with an explicit style and escaper.

    Args:
        style (StyleConfig): Markup fragments for labels and typed values.
        escape (Callable[[str], str]): Escaper applied to every piece of
            annotation text before any style fragment is attached.
    """

    def __init__(self, style: StyleConfig | None = None, escape: Callable[[str], str] = escape_html):
        self.style = style if style is not None else StyleConfig.plain()
        self.escape = escape

    def build(self, parsed: GenerationParameters) -> MetadataReport:
        style, escape = self.style, self.escape
        entries = [ReportEntry(PROMPT_LABEL, escape(parsed.positive), KIND_SECTION)]
        if parsed.negative:
            entries.append(ReportEntry(NEGATIVE_LABEL, escape(parsed.negative), KIND_SECTION))
        if parsed.style_refs:
            refs = style.line_break.join(format_style_ref(ref, style, escape) for ref in parsed.style_refs)
            entries.append(ReportEntry(LORA_LABEL, refs, KIND_SECTION))

        settings: dict[str, str] = {}
        for entry in parsed.settings:
            settings[escape(entry.key)] = format_setting_value(entry, style, escape)
        entries.extend(ReportEntry(key, value, KIND_SETTING) for key, value in settings.items())
        logger.debug("[PNGInfo] Report built with %d entries (%d settings)", len(entries), len(settings))
        return MetadataReport(entries, parsed)

    @staticmethod
    def error(message: str = NO_METADATA_MESSAGE) -> MetadataReport:
        return MetadataReport([ReportEntry(ERROR_LABEL, message, KIND_ERROR)])


__all__ = [
    "ERROR_LABEL",
    "PROMPT_LABEL",
    "NEGATIVE_LABEL",
    "LORA_LABEL",
    "NO_METADATA_MESSAGE",
    "PARAMETERS_ERROR_MESSAGE",
    "PROMPT_ERROR_MESSAGE",
    "UNSUPPORTED_FORMAT_MESSAGE",
    "ReportEntry",
    "MetadataReport",
    "MetadataReportBuilder",
]
