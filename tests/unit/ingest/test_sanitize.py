"""Tests for invisible-character stripping and line cleanup."""

import pytest

from chatsift.ingest.sanitize import clean_lines, normalize_newlines, sanitize, strip_invisible

INVISIBLES = [
    "\u200b", "\u200c", "\u200d", "\u200e", "\u200f",
    "\ufeff", "\u2028", "\u2029", "\u00ad",
    "\u202a", "\u202b", "\u202c", "\u202d", "\u202e",
    "\u061c", "\u2066", "\u2067", "\u2068", "\u2069",
]


@pytest.mark.parametrize("char", INVISIBLES)
def test_strips_each_invisible_character(char):
    assert sanitize(f"12/05/2023{char}, 10:01 - A: hi") == "12/05/2023, 10:01 - A: hi"


def test_leading_bom_and_mention_isolates_are_removed():
    text = "\ufeff12/05/2023, 10:01 - Alice: @\u2068Bob\u2069 look \u200eIMG-1.jpg"
    assert sanitize(text) == "12/05/2023, 10:01 - Alice: @Bob look IMG-1.jpg"


def test_line_endings_are_normalized():
    assert normalize_newlines("a\r\nb\rc\nd") == "a\nb\nc\nd"
    assert sanitize("a\r\u200b\nb") == "a\nb"


def test_visible_text_is_untouched():
    text = "Ol\u00e1, Jo\u00e3o! \u041f\u0440\u0438\u0432\u0435\u0442 \U0001f44b \u2014 12.05.23"
    assert sanitize(text) == text
    assert strip_invisible(text) == text


@pytest.mark.parametrize(
    "text",
    ["", "plain", "a\r\nb\r", "\r\u200b\n\u200b\r\n", "\ufeff\ufeff\r\r\n", "x\u2028y\u2029z"],
)
def test_sanitize_is_idempotent(text):
    once = sanitize(text)
    assert sanitize(once) == once


def test_clean_lines_trims_and_drops_blank_lines():
    lines = ["  12/05/2023, 10:01 - A: hi  ", "", "   ", "\u200e", "\u200b  next \u200f", "\t"]
    assert clean_lines(lines) == ["12/05/2023, 10:01 - A: hi", "next"]


def test_default_sanitize_keeps_blank_lines():
    assert sanitize("a\n\n\nb") == "a\n\n\nb"
