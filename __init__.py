# ruff: noqa: N999 - Package folder name mandated by ComfyUI extension registry (CamelCase preserved)
"""ComfyUI custom node entry point for the PNGInfo Reader.

ComfyUI imports this folder as a package and reads `NODE_CLASS_MAPPINGS` /
`NODE_DISPLAY_NAME_MAPPINGS`. The library itself lives in `pnginfo_reader`
and can be used without ComfyUI.
"""

import importlib
import logging
import os

__all__ = [
    # Populated lazily; left for static analyzers
    "NODE_CLASS_MAPPINGS",
    "NODE_DISPLAY_NAME_MAPPINGS",
    "pnginfo_reader",  # exposed via __getattr__ for lazy import
]

NODE_CLASS_MAPPINGS = {}
NODE_DISPLAY_NAME_MAPPINGS = {}

logger = logging.getLogger(__name__)


def _lazy_load_nodes():  # pragma: no cover - side-effect only
    global NODE_CLASS_MAPPINGS, NODE_DISPLAY_NAME_MAPPINGS
    if NODE_CLASS_MAPPINGS:  # already loaded
        return
    from .pnginfo_reader.nodes import NODE_CLASS_MAPPINGS as _NCM
    from .pnginfo_reader.nodes import NODE_DISPLAY_NAME_MAPPINGS as _NDNM

    NODE_CLASS_MAPPINGS = _NCM
    NODE_DISPLAY_NAME_MAPPINGS = _NDNM


def _maybe_log_startup():  # pragma: no cover
    """Log the startup line exactly once per Python session."""
    # The logging registry outlives module reloads within one session.
    startup_registry = logging.getLogger("_startup_registry")
    startup_marker = f"{__name__}_logged"
    if hasattr(startup_registry, startup_marker):
        return
    setattr(startup_registry, startup_marker, True)

    from .pnginfo_reader.utils.color import cstr
    from .pnginfo_reader.version import resolve_runtime_version

    logger.info(
        " ".join(
            [
                cstr(f"v{resolve_runtime_version()}").msg_o,
                cstr("Loaded").lightviolet,
                cstr(len(NODE_CLASS_MAPPINGS)).end,
                cstr("nodes successfully.").lightviolet,
            ]
        )
    )


def __getattr__(name):  # pragma: no cover - simple passthrough
    if name == "pnginfo_reader":
        mod = importlib.import_module(f"{__name__}.pnginfo_reader")
        globals()[name] = mod
        return mod
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


if "PYTEST_CURRENT_TEST" not in os.environ and "PNGINFO_TEST_MODE" not in os.environ:
    _lazy_load_nodes()
    _maybe_log_startup()
