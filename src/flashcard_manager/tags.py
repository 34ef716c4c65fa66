"""Tag normalization helpers."""

import re
from collections.abc import Iterable

_DISALLOWED = re.compile(r"[^a-z0-9\-_\s]")
_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[,\s]+")


def sanitize_tag(raw: str) -> str:
    """Normalize a single tag.

    Lowercases, strips characters outside ``[a-z0-9-_]``, trims, and collapses
    internal whitespace to single hyphens.
    """
    tag = _DISALLOWED.sub("", raw.lower()).strip()
    return _WHITESPACE.sub("-", tag)


def merge_tags(existing: Iterable[str], new: Iterable[str]) -> list[str]:
    """Union two tag sequences, keeping first-seen order."""
    merged: list[str] = []
    for tag in [*existing, *new]:
        if tag and tag not in merged:
            merged.append(tag)
    return merged


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Sanitize and de-duplicate a list of tags."""
    return merge_tags([], (sanitize_tag(tag) for tag in tags))


def parse_tag_input(text: str) -> list[str]:
    """Split raw tag text on commas and whitespace into normalized tags."""
    tokens = [token for token in _SEPARATORS.split(text.strip()) if token]
    return normalize_tags(tokens)
