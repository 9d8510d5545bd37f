"""Parser for A1111/Forge-style generation annotations.

The annotation written by those tools is::

    <positive prompt, possibly several lines, may contain <lora:name:0.8>>
    Negative prompt: <negative prompt, possibly several lines>
    Steps: 30, Sampler: Euler a, CFG scale: 7, Seed: 1, Model: realisticVision

The last line holds the settings; everything before it is the prompt block.
An annotation with a single line has no settings line at all.

Besides the pure split, this module owns the display rules for the parsed
pieces (style references and typed setting values) because they depend on
the same shapes the parser recognizes.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from ..style import StyleConfig
from ..utils.text import clean_edges, escape_html, is_number
from .tokenizer import SettingEntry, tokenize_parameters

logger = logging.getLogger(__name__)

NEGATIVE_MARKER = "Negative prompt:"
LINE_SEPARATOR = "\n"
MODEL_KEY = "Model"

STYLE_REF_RE = re.compile(r"<[^>]+>")
# <category:file:weight>; the weight keeps any further colons (e.g. clip strength).
STYLE_REF_PARTS_RE = re.compile(r"^<([^:>]*):([^:>]*):([^>]*)>$")


def _debug_enabled() -> bool:
    return os.environ.get("PNGINFO_DEBUG", "").strip().lower() not in ("", "0", "false", "no")


@dataclass
class GenerationParameters:
    """Everything extracted from one annotation.

    ``prompt_block`` and ``settings_line`` keep the raw split so the annotation
    text can be reassembled with ``LINE_SEPARATOR``.
    """

    positive: str = ""
    negative: str = ""
    style_refs: list[str] = field(default_factory=list)
    settings: list[SettingEntry] = field(default_factory=list)
    prompt_block: str = ""
    settings_line: str = ""

    def settings_dict(self) -> dict[str, str]:
        """Collapse settings into a mapping: last value wins, first position kept."""
        result: dict[str, str] = {}
        for entry in self.settings:
            result[entry.key] = entry.value
        return result

    def reassemble(self) -> str:
        if not self.settings_line:
            return self.prompt_block
        return self.prompt_block + LINE_SEPARATOR + self.settings_line


def split_annotation(text: str) -> tuple[str, str]:
    """Return ``(prompt_block, settings_line)`` for an annotation.

    Trailing whitespace is dropped first so a final newline does not turn
    into an empty settings line.
    """
    lines = (text or "").rstrip().split(LINE_SEPARATOR)
    if len(lines) == 1:
        return lines[0], ""
    return LINE_SEPARATOR.join(lines[:-1]), lines[-1]


def split_negative(prompt_block: str) -> tuple[str, str]:
    """Split a prompt block at the first ``Negative prompt:`` marker."""
    positive, marker, negative = prompt_block.partition(NEGATIVE_MARKER)
    if not marker:
        return prompt_block.strip(), ""
    return positive.strip(), negative.strip()


def extract_style_refs(positive: str) -> tuple[list[str], str]:
    """Return the ``<...>`` spans of ``positive`` and the text without them."""
    refs = STYLE_REF_RE.findall(positive)
    return refs, STYLE_REF_RE.sub("", positive)


class GenerationTextParser:
    """Split an annotation into prompts, style references and settings."""

    def parse(self, text: str) -> GenerationParameters:
        prompt_block, settings_line = split_annotation(text)
        positive, negative = split_negative(prompt_block)
        style_refs, positive = extract_style_refs(positive)
        result = GenerationParameters(
            positive=clean_edges(positive),
            negative=clean_edges(negative),
            style_refs=style_refs,
            settings=tokenize_parameters(settings_line) if settings_line else [],
            prompt_block=prompt_block,
            settings_line=settings_line,
        )
        if _debug_enabled():
            logger.debug("[PNGInfo] Positive prompt: %r", result.positive)
            logger.debug("[PNGInfo] Negative prompt: %r", result.negative)
            logger.debug("[PNGInfo] Style references: %r", result.style_refs)
            logger.debug("[PNGInfo] Settings line: %r -> %d entries", settings_line, len(result.settings))
        return result


def parse_generation_text(text: str) -> GenerationParameters:
    return GenerationTextParser().parse(text)


def format_style_ref(ref: str, style: StyleConfig, escape: Callable[[str], str] = escape_html) -> str:
    """Render one style reference for display.

    ``<category:file:weight>`` gets the file name and the weight highlighted;
    any other span is escaped whole so its angle brackets stay visible.
    """
    match = STYLE_REF_PARTS_RE.match(ref)
    if match is None:
        return escape(ref)
    category, name, weight = match.groups()
    return (
        f"{escape('<')}{escape(category)}:"
        f"{style.file}{escape(name)}{style.default}:"
        f"{style.integer}{escape(weight)}{style.default}{escape('>')}"
    )


def format_setting_value(entry: SettingEntry, style: StyleConfig, escape: Callable[[str], str] = escape_html) -> str:
    """Render a setting value: numbers and the model name are highlighted.

    Escaping happens before the style fragment is attached so the fragment
    itself is never escaped.
    """
    text = escape(entry.value)
    if is_number(entry.value):
        return f"{style.integer}{text}"
    if escape(entry.key) == MODEL_KEY:
        return f"{style.file}{text}"
    return text


__all__ = [
    "NEGATIVE_MARKER",
    "GenerationParameters",
    "GenerationTextParser",
    "parse_generation_text",
    "split_annotation",
    "split_negative",
    "extract_style_refs",
    "format_style_ref",
    "format_setting_value",
]
