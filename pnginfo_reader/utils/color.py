"""ANSI colored strings for console log messages.

``cstr("text").red.bold`` returns a new ``cstr`` wrapped in the requested
escape codes. Attribute lookup is case-insensitive and falls back to the
registered codes on :class:`cstr.color`, so ``cstr("x").msg`` prefixes the
package banner.
"""

from __future__ import annotations


class cstr(str):  # noqa: N801 - lowercase mirrors str
    """A ``str`` subclass that gains color attributes."""

    class color:  # noqa: N801
        END = "\33[0m"
        BOLD = "\33[1m"
        ITALIC = "\33[3m"
        UNDERLINE = "\33[4m"
        BLINK = "\33[5m"
        SELECTED = "\33[7m"

        BLACK = "\33[30m"
        RED = "\33[31m"
        GREEN = "\33[32m"
        YELLOW = "\33[33m"
        BLUE = "\33[34m"
        VIOLET = "\33[35m"
        BEIGE = "\33[36m"
        WHITE = "\33[37m"

        GREY = "\33[90m"
        LIGHTRED = "\33[91m"
        LIGHTGREEN = "\33[92m"
        LIGHTYELLOW = "\33[93m"
        LIGHTBLUE = "\33[94m"
        LIGHTVIOLET = "\33[95m"
        LIGHTBEIGE = "\33[96m"
        LIGHTWHITE = "\33[97m"

        ORANGE = "\33[38;5;208m"

        @staticmethod
        def add_code(name: str, code: str) -> None:
            """Register a new escape code under ``name`` (stored upper-case).

            Raises:
                ValueError: If a code with that name already exists.
            """
            key = name.upper()
            if hasattr(cstr.color, key):
                raise ValueError(f"'cstr.color' already contains a code with the name '{name}'.")
            setattr(cstr.color, key, code)

    def __new__(cls, text):
        return super().__new__(cls, text)

    def __getattr__(self, attr):
        if attr.lower().startswith("_"):
            raise AttributeError(attr)
        code = getattr(self.color, attr.upper(), None)
        if code is None or not isinstance(code, str):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{attr}'")
        if attr.lower().startswith("msg") or attr.lower() in ("warning", "warn", "error"):
            return cstr(code + self)
        return cstr(code + self + cstr.color.END)

    def print(self, **kwargs) -> None:
        print(self, **kwargs)


# Message templates (prefix banners).
cstr.color.add_code("msg", f"{cstr.color.BLUE}PNGInfo Reader: {cstr.color.END}")
cstr.color.add_code("msg_o", f"{cstr.color.ORANGE}PNGInfo Reader: {cstr.color.END}")
cstr.color.add_code("warning", f"{cstr.color.BLUE}PNGInfo Reader:{cstr.color.ORANGE} [Warning] {cstr.color.END}")
cstr.color.add_code("warn", f"{cstr.color.BLUE}PNGInfo Reader:{cstr.color.ORANGE} [Warning] {cstr.color.END}")
cstr.color.add_code("error", f"{cstr.color.RED}PNGInfo Reader:{cstr.color.END} [Error] {cstr.color.END}")

__all__ = ["cstr"]
