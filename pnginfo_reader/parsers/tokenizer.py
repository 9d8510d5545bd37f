"""Quote-aware splitting of an A1111-style settings line.

A settings line looks like::

    Steps: 20, Sampler: "Euler a, fast", CFG scale: 7, Seed: 1234

Commas separate ``key: value`` segments except inside a double-quoted span.
A quote that is never closed keeps the rest of the line inside the current
segment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import UnparsableSettingsLineError

logger = logging.getLogger(__name__)

QUOTE = '"'
DELIMITER = ","
KEY_SEPARATOR = ":"


@dataclass(frozen=True)
class SettingEntry:
    """One ``key: value`` pair from a settings line."""

    key: str
    value: str


def split_outside_quotes(line: str, delimiter: str = DELIMITER) -> list[str]:
    """Split ``line`` on ``delimiter`` wherever it is not inside double quotes.

    Args:
        line (str): Text to split.
        delimiter (str): Single-character separator.

    Returns:
        list[str]: Raw segments, untrimmed, in order.
    """
    segments: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            segments.append("".join(current))
            current = []
            continue
        current.append(char)
    segments.append("".join(current))
    return segments


def unquote(value: str) -> str:
    """Strip exactly one outer pair of double quotes, if present."""
    if len(value) >= 2 and value.startswith(QUOTE) and value.endswith(QUOTE):
        return value[1:-1]
    return value


def tokenize_parameters(line: str, strict: bool = False) -> list[SettingEntry]:
    """Turn a settings line into ordered :class:`SettingEntry` objects.

    Segments without a ``:`` are dropped. Duplicate keys are all kept; the
    caller decides how to collapse them.

    Args:
        line (str): The settings line.
        strict (bool): Raise instead of returning an empty list when a
            non-blank line contains no ``key: value`` segment.

    Returns:
        list[SettingEntry]: Entries in left-to-right order.

    Raises:
        UnparsableSettingsLineError: Only when ``strict`` is True.
    """
    entries: list[SettingEntry] = []
    for segment in split_outside_quotes(line or ""):
        part = segment.strip()
        if not part:
            continue
        key, sep, value = part.partition(KEY_SEPARATOR)
        if not sep:
            logger.debug("[PNGInfo] Dropping settings segment without ':' -> %r", part)
            continue
        entries.append(SettingEntry(key.strip(), unquote(value.strip())))
    if strict and not entries and (line or "").strip():
        raise UnparsableSettingsLineError(f"no 'key: value' segment in settings line {line!r}")
    return entries


__all__ = ["SettingEntry", "split_outside_quotes", "unquote", "tokenize_parameters"]
