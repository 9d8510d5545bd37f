"""Tests for the ANSI colored string helper.

This module tests:
- pnginfo_reader/utils/color.py
"""

from __future__ import annotations

import pytest

from pnginfo_reader.utils.color import cstr


class TestColorAttributes:
    @pytest.mark.parametrize("name", ["red", "green", "blue", "yellow", "bold", "italic", "underline", "orange"])
    def test_wraps_text_in_code_and_reset(self, name):
        result = getattr(cstr("text"), name)
        assert result == getattr(cstr.color, name.upper()) + "text" + cstr.color.END
        assert isinstance(result, cstr)

    def test_chaining(self):
        result = cstr("text").red.bold
        assert result.startswith(cstr.color.BOLD + cstr.color.RED)
        assert "text" in result

    def test_case_insensitive(self):
        assert cstr("x").RED == cstr("x").red

    def test_unknown_attribute(self):
        with pytest.raises(AttributeError, match="has no attribute"):
            _ = cstr("text").nonexistent_color

    def test_private_names_not_resolved(self):
        assert not hasattr(cstr("text"), "_hidden")

    def test_still_a_str(self):
        assert cstr("abc").upper() == "ABC"


class TestCodes:
    @pytest.mark.parametrize(
        "name, code",
        [("END", "\33[0m"), ("BOLD", "\33[1m"), ("BLACK", "\33[30m"), ("RED", "\33[31m"), ("WHITE", "\33[37m")],
    )
    def test_ansi_values(self, name, code):
        assert getattr(cstr.color, name) == code

    def test_orange_uses_256_color_mode(self):
        assert "38;5;208" in cstr.color.ORANGE

    def test_add_code_stores_upper_case(self):
        cstr.color.add_code("pnginfo_test_code", "\33[99m")
        try:
            assert cstr.color.PNGINFO_TEST_CODE == "\33[99m"
            assert cstr("x").pnginfo_test_code == "\33[99mx" + cstr.color.END
        finally:
            delattr(cstr.color, "PNGINFO_TEST_CODE")

    def test_add_code_rejects_duplicates(self):
        with pytest.raises(ValueError, match="already contains"):
            cstr.color.add_code("red", "\33[99m")


class TestTemplates:
    @pytest.mark.parametrize("name", ["MSG", "MSG_O", "WARNING", "WARN", "ERROR"])
    def test_banner_present(self, name):
        assert "PNGInfo Reader" in getattr(cstr.color, name)

    def test_warning_and_error_tags(self):
        assert "[Warning]" in cstr.color.WARNING
        assert "[Error]" in cstr.color.ERROR

    @pytest.mark.parametrize("name", ["msg", "msg_o", "warning", "warn", "error"])
    def test_templates_prefix_without_reset(self, name):
        result = getattr(cstr("loaded"), name)
        assert result == getattr(cstr.color, name.upper()) + "loaded"


def test_print(capsys):
    cstr("hello").green.print()
    assert "hello" in capsys.readouterr().out
