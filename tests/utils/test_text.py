"""Tests for text helpers and lenient parameter parsing."""

import pytest

from Multitenant_API.utils.params import to_bool, to_float, to_int
from Multitenant_API.utils.text import (
    format_message,
    markdown_to_html,
    no_spaces,
    pluralize,
    strip_and_trim,
)


def test_format_message_substitutes_positional_fields() -> None:
    assert format_message("Hello {0}, you have {1} votes", ["Ann", "3"]) == "Hello Ann, you have 3 votes"


def test_format_message_leaves_unmatched_placeholders() -> None:
    assert format_message("{0} and {2}", ["a"]) == "a and {2}"
    assert format_message(None) == ""


def test_no_spaces_collapses_whitespace() -> None:
    assert no_spaces("  hello   big world ") == "hellobigworld"
    assert no_spaces("hello big world", "-") == "hello-big-world"
    assert no_spaces(None) == ""


def test_strip_and_trim_removes_symbols() -> None:
    assert strip_and_trim("  Hello, world!! (really) ") == "Hello world really"


@pytest.mark.parametrize(
    ("word", "plural"),
    [("user", "users"), ("address", "addresses"), ("category", "categories"), ("day", "days")],
)
def test_pluralize(word: str, plural: str) -> None:
    assert pluralize(word) == plural


def test_params_fall_back_to_defaults() -> None:
    assert to_int("12", 0) == 12
    assert to_int("twelve", 7) == 7
    assert to_int(None, 3) == 3
    assert to_float(" 1.5 ", 0.0) == 1.5
    assert to_float("x", 2.0) == 2.0
    assert to_bool("TRUE") is True
    assert to_bool("yes") is False
    assert to_bool(None) is False


def test_markdown_to_html_renders_fragment() -> None:
    assert markdown_to_html("# Title\n\nSome *text*") == "<h1>Title</h1>\n<p>Some <em>text</em></p>"
    assert markdown_to_html("   ") == ""
    assert markdown_to_html(None) == ""
