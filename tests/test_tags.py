"""Tests for tag normalization."""

import pytest

from flashcard_manager.tags import merge_tags, normalize_tags, parse_tag_input, sanitize_tag


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Bio", "bio"),
        ("  cell   biology ", "cell-biology"),
        ("C++", "c"),
        ("snake_case", "snake_case"),
        ("año", "ao"),
        ("!!!", ""),
    ],
)
def test_sanitize_tag(raw: str, expected: str) -> None:
    """Test single-tag sanitizing."""
    assert sanitize_tag(raw) == expected


@pytest.mark.parametrize("raw", ["Bio", "Cell Biology", "x-y_z", "  A  b  "])
def test_sanitize_is_idempotent(raw: str) -> None:
    """Test that normalizing a normalized tag changes nothing."""
    once = sanitize_tag(raw)
    assert sanitize_tag(once) == once


def test_parse_tag_input_splits_on_commas_and_whitespace() -> None:
    """Test tag input parsing."""
    assert parse_tag_input("Bio, chem  physics,,Bio") == ["bio", "chem", "physics"]


def test_parse_tag_input_empty() -> None:
    """Test parsing blank input."""
    assert parse_tag_input("   ") == []
    assert parse_tag_input(", ,") == []


def test_merge_tags_keeps_first_seen_order() -> None:
    """Test order-preserving union."""
    assert merge_tags(["bio", "chem"], ["physics", "bio"]) == ["bio", "chem", "physics"]


def test_normalize_tags_drops_empty_and_duplicates() -> None:
    """Test list normalization."""
    assert normalize_tags(["Bio", "", "BIO", "?"]) == ["bio"]
