"""Text helpers behind the stateless ``/utils`` endpoints."""

from __future__ import annotations

import re
from collections.abc import Sequence

import markdown

_PLACEHOLDER = re.compile(r"\{(\d+)\}")
_WHITESPACE = re.compile(r"\s+")
_SYMBOLS = re.compile(r"[^\w\s]|_")


def format_message(message: str | None, fields: Sequence[str] = ()) -> str:
    """Substitute ``{0}``, ``{1}`` ... placeholders with ``fields``.

    Placeholders without a matching field are left untouched.
    """
    if not message:
        return ""

    def replace(match: re.Match[str]) -> str:
        index = int(match.group(1))
        return fields[index] if index < len(fields) else match.group(0)

    return _PLACEHOLDER.sub(replace, message)


def no_spaces(value: str | None, replacement: str | None = None) -> str:
    """Collapse every whitespace run in ``value`` into ``replacement``."""
    if not value:
        return ""
    return _WHITESPACE.sub(replacement or "", value.strip())


def strip_and_trim(value: str | None) -> str:
    """Drop punctuation and symbols, collapse whitespace and trim."""
    if not value:
        return ""
    return _WHITESPACE.sub(" ", _SYMBOLS.sub(" ", value)).strip()


def markdown_to_html(text: str | None) -> str:
    """Render Markdown as an HTML fragment."""
    if not text or not text.strip():
        return ""
    return markdown.markdown(text)


def pluralize(word: str) -> str:
    """Return a naive English plural of ``word``."""
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"
