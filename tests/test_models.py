"""Tests for data models."""

import pytest

from flashcard_manager.errors import ValidationError
from flashcard_manager.models import Card, CardPatch, NewCard, is_temp_id, new_temp_id


def test_card_creation() -> None:
    """Test card creation with defaults."""
    card = Card(id="c1", prompt="Q", answer="A")
    assert card.id == "c1"
    assert card.tags == []
    assert card.created_at.tzinfo is not None


def test_card_normalizes_stored_tags() -> None:
    """Test that tags coming from storage are normalized like user input."""
    card = Card(id="c1", prompt="Q", answer="A", tags=["Cell Biology", "cell biology", "", "Bio!"])
    assert card.tags == ["cell-biology", "bio"]


def test_new_card_normalizes_tags() -> None:
    """Test that new card tags are normalized and de-duplicated."""
    new_card = NewCard(prompt="Q", answer="A", tags=["Bio", "bio", "Cell Biology", "!!"])
    assert new_card.tags == ["bio", "cell-biology"]


@pytest.mark.parametrize("prompt,answer", [("", "A"), ("Q", ""), ("   ", "A"), ("Q", "\n")])
def test_new_card_requires_text(prompt: str, answer: str) -> None:
    """Test that blank prompt or answer is rejected."""
    with pytest.raises(ValidationError):
        NewCard(prompt=prompt, answer=answer)


def test_patch_only_sets_given_fields() -> None:
    """Test that a patch leaves unset fields alone."""
    card = Card(id="c1", prompt="Q", answer="A", tags=["bio"])
    patch = CardPatch(answer="B")

    patch.apply(card)

    assert patch.fields() == {"answer": "B"}
    assert card.prompt == "Q"
    assert card.answer == "B"
    assert card.tags == ["bio"]


def test_patch_rejects_blank_prompt() -> None:
    """Test patch validation."""
    with pytest.raises(ValidationError):
        CardPatch(prompt=" ")


def test_patch_allows_clearing_tags() -> None:
    """Test that an empty tag list is a real change."""
    card = Card(id="c1", prompt="Q", answer="A", tags=["bio"])
    CardPatch(tags=[]).apply(card)
    assert card.tags == []


def test_temp_ids_are_unique() -> None:
    """Test temporary ID generation."""
    first, second = new_temp_id(), new_temp_id()
    assert first != second
    assert is_temp_id(first)
    assert not is_temp_id("c1")
