"""Annotation flavors and the fallback chain that turns them into a report.

A metadata mapping can carry two kinds of annotation:

* ``parameters``: plain A1111/Forge text, parsed by :class:`GenerationTextParser`;
* ``prompt``: a ComfyUI JSON graph, parsed by an injected ``graph_parser``.

Both are resolved once into :class:`PlainTextAnnotation` /
:class:`GraphJsonAnnotation` values and tried in that order. The first one
that parses wins; a failure records an error for its section and the next
candidate is tried. When nothing is left the report is a single error entry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from ..errors import AnnotationParseError, NoAnnotationFoundError, PNGInfoError
from ..report import (
    NO_METADATA_MESSAGE,
    PARAMETERS_ERROR_MESSAGE,
    PROMPT_ERROR_MESSAGE,
    MetadataReport,
    MetadataReportBuilder,
)
from ..style import StyleConfig
from ..utils.text import escape_html
from .generation import GenerationParameters, GenerationTextParser

logger = logging.getLogger(__name__)

PARAMETERS_KEY = "parameters"
PROMPT_KEY = "prompt"

GraphParser = Callable[[str], GenerationParameters]


@dataclass(frozen=True)
class PlainTextAnnotation:
    raw: str

    def parse(self, graph_parser: GraphParser | None = None) -> GenerationParameters:
        return GenerationTextParser().parse(self.raw)


@dataclass(frozen=True)
class GraphJsonAnnotation:
    raw: str

    def parse(self, graph_parser: GraphParser | None = None) -> GenerationParameters:
        if graph_parser is None:
            raise AnnotationParseError("no graph parser configured for the 'prompt' section")
        return graph_parser(self.raw)


Annotation = PlainTextAnnotation | GraphJsonAnnotation


def resolve_annotations(chunks: Mapping[str, str] | None) -> list[Annotation]:
    """Return the annotations present in ``chunks`` in the order to try them."""
    found: list[Annotation] = []
    if not chunks:
        return found
    parameters = chunks.get(PARAMETERS_KEY)
    if isinstance(parameters, str) and parameters.strip():
        found.append(PlainTextAnnotation(parameters))
    prompt = chunks.get(PROMPT_KEY)
    if isinstance(prompt, str) and prompt.strip():
        found.append(GraphJsonAnnotation(prompt))
    return found


def require_annotation(chunks: Mapping[str, str] | None) -> Annotation:
    """Return the preferred annotation or raise :class:`NoAnnotationFoundError`."""
    found = resolve_annotations(chunks)
    if not found:
        raise NoAnnotationFoundError(NO_METADATA_MESSAGE)
    return found[0]


def build_report(
    chunks: Mapping[str, str] | None,
    style: StyleConfig | None = None,
    escape: Callable[[str], str] = escape_html,
    graph_parser: GraphParser | None = None,
) -> MetadataReport:
    """Parse the annotations in ``chunks`` into a :class:`MetadataReport`.

    Args:
        chunks: PNG text-chunk style mapping (``parameters``/``prompt``).
        style: Markup fragments; plain text when omitted.
        escape: Escaper applied to annotation text before styling.
        graph_parser: Collaborator that parses the ComfyUI ``prompt`` graph.

    Returns:
        MetadataReport: The first successful parse, or a single error entry.
    """
    builder = MetadataReportBuilder(style, escape)
    candidates = resolve_annotations(chunks)
    if not candidates:
        logger.debug("[PNGInfo] %s", NO_METADATA_MESSAGE)
        return builder.error(NO_METADATA_MESSAGE)

    error_message = NO_METADATA_MESSAGE
    for annotation in candidates:
        match annotation:
            case PlainTextAnnotation():
                failure = PARAMETERS_ERROR_MESSAGE
            case GraphJsonAnnotation():
                failure = PROMPT_ERROR_MESSAGE
        try:
            parsed = annotation.parse(graph_parser)
        except (PNGInfoError, ValueError, TypeError) as err:
            logger.warning("[PNGInfo] %s: %s", failure, err)
            error_message = failure
            continue
        return builder.build(parsed)
    return builder.error(error_message)


__all__ = [
    "PARAMETERS_KEY",
    "PROMPT_KEY",
    "PlainTextAnnotation",
    "GraphJsonAnnotation",
    "Annotation",
    "GraphParser",
    "resolve_annotations",
    "require_annotation",
    "build_report",
]
