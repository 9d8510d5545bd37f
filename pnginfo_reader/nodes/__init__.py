"""Registers the PNGInfo Reader nodes with ComfyUI.

`NODE_CLASS_MAPPINGS` and `NODE_DISPLAY_NAME_MAPPINGS` are picked up by the
top-level package, which ComfyUI imports as a custom node.
"""

from .reader_node import PNGInfoReader
from .show_text import ShowText

__all__ = [
    "PNGInfoReader",
    "ShowText",
]

NODE_CLASS_MAPPINGS = {
    "PNGInfoReader": PNGInfoReader,
    "ShowText|pnginfo": ShowText,
}
NODE_DISPLAY_NAME_MAPPINGS = {
    "PNGInfoReader": "PNGInfo Reader",
    "ShowText|pnginfo": "Show Text (PNGInfo)",
}
