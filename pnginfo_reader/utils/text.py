"""Small string helpers shared by the parsers and the report builder.

Keep this file lightweight: no heavy imports.
"""
from __future__ import annotations

import html
import re

# Plain decimal notation only; "nan", "inf" and "1_000" are text, not numbers.
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

_WRAPPING_PAIRS = {
    '"': '"',
    "'": "'",
    "(": ")",
    "[": "]",
    "{": "}",
}


def is_number(value: str) -> bool:
    """Return True when ``value`` (ignoring edge whitespace) is a decimal number."""
    if not isinstance(value, str):
        return False
    return bool(_NUMBER_RE.match(value.strip()))


def escape_html(text: str) -> str:
    """HTML-escape ``text`` including quotes (default report escaper)."""
    return html.escape(text, quote=True)


def no_escape(text: str) -> str:
    """Identity escaper for plain-text destinations."""
    return text


def _wraps_whole(text: str) -> bool:
    opening = text[0]
    closing = _WRAPPING_PAIRS.get(opening)
    if closing is None or text[-1] != closing or len(text) < 2:
        return False
    inner = text[1:-1]
    if opening == closing:
        # A quote only wraps the text when it does not occur inside it.
        return opening not in inner
    depth = 0
    for char in inner:
        if char == opening:
            depth += 1
        elif char == closing:
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def clean_edges(text: str) -> str:
    """Trim whitespace and one matched wrapping quote/bracket pair.

    Only a pair that encloses the entire text is removed, so
    ``(masterpiece), cat, (blue)`` is left untouched while ``"a cat"``
    becomes ``a cat``.
    """
    cleaned = (text or "").strip()
    if cleaned and _wraps_whole(cleaned):
        cleaned = cleaned[1:-1].strip()
    return cleaned


__all__ = ["is_number", "escape_html", "no_escape", "clean_edges"]
