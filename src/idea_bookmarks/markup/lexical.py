"""Lexical scanning helpers for loosely structured IDE markup."""

from __future__ import annotations

import re
from typing import Final

_QUOTES: Final[tuple[str, ...]] = ('"', "'")

# Order matters: "&amp;" must be replaced last.
_ENTITY_REPLACEMENTS: Final[tuple[tuple[str, str], ...]] = (
    ("&quot;", '"'),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)
_LINE_VALUE: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")


def extract_attr(fragment: str, attr_name: str) -> str | None:
    """Return the quoted value of the first ``attr_name=`` occurrence in fragment.

    Double quotes are tried before single quotes. Returns None when the
    attribute is absent or its opening quote is never closed.
    """
    for quote in _QUOTES:
        pattern = f"{attr_name}={quote}"
        index = fragment.find(pattern)
        if index < 0:
            continue
        start = index + len(pattern)
        end = fragment.find(quote, start)
        if end < 0:
            return None
        return fragment[start:end]
    return None


def find_keyed(text: str, attr_name: str, value: str) -> int | None:
    """Return the offset of ``attr_name="value"`` (either quote style), or None."""
    for quote in _QUOTES:
        index = text.find(f"{attr_name}={quote}{value}{quote}")
        if index >= 0:
            return index
    return None


def extract_keyed_value(
    text: str, attr_name: str, key: str, value_attr: str = "value"
) -> str | None:
    """Read ``value_attr`` from the first element tagged ``attr_name="key"``."""
    index = find_keyed(text, attr_name, key)
    if index is None:
        return None
    return extract_attr(text[index:], value_attr)


def split_on_marker(text: str, marker: str) -> list[str]:
    """Split text at every occurrence of marker, dropping the leading preamble."""
    if not marker:
        return []
    return text.split(marker)[1:]


def opening_tag(chunk: str) -> str:
    """Return chunk up to the first ``>`` that is not inside a quoted value."""
    quote: str | None = None
    for index, char in enumerate(chunk):
        if quote is not None:
            if char == quote:
                quote = None
            continue
        if char in _QUOTES:
            quote = char
            continue
        if char == ">":
            return chunk[:index]
    return chunk


def unescape_entities(text: str) -> str:
    """Replace the fixed XML entity set in a single deterministic pass order."""
    for entity, replacement in _ENTITY_REPLACEMENTS:
        text = text.replace(entity, replacement)
    return text


def parse_line_number(raw: str | None) -> int:
    """Convert a stored 0-indexed line value to 1-indexed, defaulting to 1.

    Only a plain ASCII decimal integer is converted; anything else falls back
    to the default.
    """
    if raw is None or _LINE_VALUE.fullmatch(raw) is None:
        return 1
    return int(raw) + 1
