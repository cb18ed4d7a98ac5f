"""Splitting and joining of separator-delimited tag strings."""

import re

DEFAULT_SEPARATOR = " "

# Separators that stand for a character class rather than a literal.
_SEPARATOR_CLASSES = {
    " ": r"\s",
}


def separator_pattern(separator=DEFAULT_SEPARATOR):
    """Return the compiled split pattern for ``separator``.

    A single space means "any run of whitespace"; every other separator is
    matched literally, with surrounding whitespace absorbed.
    """
    token = _SEPARATOR_CLASSES.get(separator, re.escape(separator))
    return re.compile(rf"\s*(?:{token})+\s*")


def split_tags(value, separator=DEFAULT_SEPARATOR):
    """Split ``value`` into unique, non-empty tags.

    Duplicates are collapsed case-sensitively; the first occurrence keeps its
    position.
    """
    if not value:
        return []
    tags = []
    seen = set()
    for raw in separator_pattern(separator).split(value.strip()):
        tag = raw.strip()
        if not tag or tag in seen:
            continue
        seen.add(tag)
        tags.append(tag)
    return tags


def join_tags(tags, separator=DEFAULT_SEPARATOR):
    """Join ``tags`` with the literal separator. An empty sequence gives ``""``."""
    return separator.join(tags) if tags else ""
