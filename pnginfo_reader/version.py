"""Runtime version resolution for the `pnginfo_reader` package.

The nearest `pyproject.toml` takes precedence over installed distribution
metadata; "unknown" is reported when neither is available.
`PNGINFO_VERSION_OVERRIDE` replaces both, which keeps startup banners
deterministic in tests.
"""
from __future__ import annotations

import functools
import importlib.metadata
import os
import pathlib
import tomllib

DISTRIBUTION_NAME = "PNGInfoReader"
UNKNOWN_VERSION = "unknown"


def _read_pyproject_version(start: pathlib.Path | None = None) -> str | None:
    """Read the version from the closest `pyproject.toml` above ``start``.

    Args:
        start: Where to begin the upward search; this module by default.

    Returns:
        str | None: The `[project]` version, or None when no file declares one.
    """
    here = (start or pathlib.Path(__file__)).resolve()
    pyproject = next((p / "pyproject.toml" for p in here.parents if (p / "pyproject.toml").is_file()), None)
    if pyproject is None:
        return None
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return None
    version = data.get("project", {}).get("version")
    return version if isinstance(version, str) and version else None


def _distribution_version() -> str | None:
    try:
        return importlib.metadata.version(DISTRIBUTION_NAME)
    except importlib.metadata.PackageNotFoundError:
        return None


@functools.cache
def _resolve_version() -> str:
    return _read_pyproject_version() or _distribution_version() or UNKNOWN_VERSION


def resolve_runtime_version() -> str:
    """Return the effective package version.

    `PNGINFO_VERSION_OVERRIDE` wins when set to a non-blank value.

    Returns:
        str: The version string, or "unknown".
    """
    override = os.environ.get("PNGINFO_VERSION_OVERRIDE", "").strip()
    return override or _resolve_version()
