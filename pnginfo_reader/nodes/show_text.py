"""A text display node for the PNGInfo report.

Namespaced as ``ShowText|pnginfo`` so it never collides with other packs that
ship a ``ShowText`` node. Connect the ``info`` output of the PNGInfo Reader to
see the report in the graph; the text is written back into the workflow so it
survives a reload.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def _workflow_from(extra_pnginfo) -> dict | None:
    """Return the workflow dict held in ComfyUI's hidden ``extra_pnginfo`` input."""
    if not isinstance(extra_pnginfo, list):
        logger.warning("[ShowText|pnginfo] extra_pnginfo is not a list (type=%s)", type(extra_pnginfo))
        return None
    first = extra_pnginfo[0] if extra_pnginfo else None
    if not isinstance(first, dict) or not isinstance(first.get("workflow"), dict):
        logger.warning("[ShowText|pnginfo] malformed extra_pnginfo[0] or missing 'workflow'")
        return None
    return first["workflow"]


def _store_widget_text(workflow: dict, node_id, text) -> bool:
    """Write ``text`` into the widget values of node ``node_id``; False if absent."""
    for node in workflow.get("nodes", []):
        if str(node.get("id")) == str(node_id):
            node["widgets_values"] = [text]
            return True
    logger.debug("[ShowText|pnginfo] node %s not found in workflow", node_id)
    return False


class ShowText:
    """Display one or more strings and persist them into the workflow."""

    @classmethod
    def INPUT_TYPES(cls):  # noqa: N802
        return {
            "required": {
                "text": (
                    "STRING",
                    {
                        "forceInput": True,
                        "tooltip": "Text to display, e.g. the 'info' output of the PNGInfo Reader.",
                    },
                ),
            },
            "hidden": {
                "unique_id": "UNIQUE_ID",
                "extra_pnginfo": "EXTRA_PNGINFO",
            },
        }

    INPUT_IS_LIST = True
    RETURN_TYPES = ("STRING",)
    FUNCTION = "notify"
    OUTPUT_NODE = True
    OUTPUT_IS_LIST = (True,)
    CATEGORY = "PNGInfoReader/util"

    def notify(self, text, unique_id=None, extra_pnginfo=None):
        """Return the text for display and store it in the node's widget values.

        Args:
            text (list[str]): Strings to display (list because INPUT_IS_LIST).
            unique_id (list, optional): Node id injected by ComfyUI.
            extra_pnginfo (list, optional): Extra PNG info holding the workflow.

        Returns:
            dict: UI and result payload, both carrying ``text`` unchanged.
        """
        if unique_id and extra_pnginfo is not None:
            workflow = _workflow_from(extra_pnginfo)
            if workflow is not None:
                _store_widget_text(workflow, unique_id[0], text)
        return {"ui": {"text": text}, "result": (text,)}
