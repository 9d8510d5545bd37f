"""Annotation parsers: settings tokenizer, A1111 text parser and dispatch."""

from .generation import GenerationParameters, GenerationTextParser, parse_generation_text
from .tokenizer import SettingEntry, tokenize_parameters

__all__ = [
    "GenerationParameters",
    "GenerationTextParser",
    "SettingEntry",
    "parse_generation_text",
    "tokenize_parameters",
]
