"""Tests for the create form and edit dialog state."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from flashcard_manager.backend import Backend
from flashcard_manager.editor import CardDraft, EditSession
from flashcard_manager.errors import ValidationError
from flashcard_manager.manager import CardCollection, CardManager
from flashcard_manager.models import Card, CardPatch, NewCard


@pytest.fixture
def mock_backend() -> MagicMock:
    """Create a mock backend."""
    return MagicMock(spec=Backend)


def test_draft_can_save_requires_both_sides() -> None:
    """Test the save guard."""
    draft = CardDraft(prompt="Q")
    assert not draft.can_save
    draft.answer = "  "
    assert not draft.can_save
    draft.answer = "A"
    assert draft.can_save


def test_draft_tag_input() -> None:
    """Test adding and removing tags."""
    draft = CardDraft(tags=["bio"])
    draft.tag_input = "Chem, bio physics"

    draft.add_tags_from_input()

    assert draft.tags == ["bio", "chem", "physics"]
    assert draft.tag_input == ""

    draft.remove_tag("chem")
    assert draft.tags == ["bio", "physics"]


def test_draft_blank_tag_input_is_kept() -> None:
    """Test that input producing no tags is left alone."""
    draft = CardDraft(tag_input=" ,, ")
    draft.add_tags_from_input()
    assert draft.tags == []
    assert draft.tag_input == " ,, "


def test_draft_to_new_card_strips_text() -> None:
    """Test conversion to create input."""
    draft = CardDraft(prompt="  Q  ", answer=" A ", tags=["bio"])
    assert draft.to_new_card() == NewCard(prompt="Q", answer="A", tags=["bio"])


def test_draft_to_new_card_rejects_incomplete() -> None:
    """Test conversion of an incomplete draft."""
    with pytest.raises(ValidationError):
        CardDraft(prompt="Q").to_new_card()


def test_draft_save_clears_form(mock_backend: MagicMock) -> None:
    """Test saving a draft."""
    saved = Card(id="c1", prompt="Q", answer="A", tags=["bio"])
    mock_backend.create = AsyncMock(return_value=saved)
    manager = CardManager(mock_backend)
    draft = CardDraft(prompt="Q", answer="A", tags=["bio"], flipped=True)

    result = asyncio.run(draft.save(manager))

    assert result == saved
    assert draft.prompt == ""
    assert draft.tags == []
    assert not draft.flipped
    assert not draft.saving
    assert manager.cards == [saved]


def test_draft_save_failure_keeps_input(mock_backend: MagicMock) -> None:
    """Test that a failed save leaves the form filled in."""
    mock_backend.create = AsyncMock(side_effect=ConnectionError("offline"))
    manager = CardManager(mock_backend)
    draft = CardDraft(prompt="Q", answer="A")

    result = asyncio.run(draft.save(manager))

    assert result is None
    assert draft.prompt == "Q"
    assert not draft.saving
    assert manager.cards == []


def test_draft_save_ignored_while_saving(mock_backend: MagicMock) -> None:
    """Test that a second save is ignored while one is running."""
    mock_backend.create = AsyncMock()
    draft = CardDraft(prompt="Q", answer="A", saving=True)

    assert asyncio.run(draft.save(CardManager(mock_backend))) is None
    mock_backend.create.assert_not_awaited()


def test_edit_session_open_and_close() -> None:
    """Test opening and closing the edit dialog."""
    session = EditSession()
    assert not session.is_open

    session.open(Card(id="c1", prompt="Q", answer="A", tags=["bio"]))
    assert session.is_open
    assert session.prompt == "Q"
    assert session.tags == ["bio"]

    session.close()
    assert not session.is_open
    assert session.prompt == ""


def test_edit_session_closes_before_backend_confirms(mock_backend: MagicMock) -> None:
    """Test that the dialog closes right after the local change."""
    card = Card(id="c1", prompt="Q", answer="A", tags=["bio"])
    manager = CardManager(mock_backend, CardCollection([card]))
    session = EditSession()
    session.open(card)
    session.answer = "New A"
    session.tag_input = "chem"
    session.add_tags_from_input()

    async def fake_update(card_id: str, patch: CardPatch) -> Card:
        assert not session.is_open
        assert manager.collection.get(card_id).answer == "New A"
        return Card(id=card_id, prompt="Q", answer="New A", tags=["bio", "chem"])

    mock_backend.update = AsyncMock(side_effect=fake_update)

    result = asyncio.run(session.submit(manager))

    assert result is not None
    assert result.tags == ["bio", "chem"]
    mock_backend.update.assert_awaited_once()
    patch = mock_backend.update.call_args[0][1]
    assert patch == CardPatch(prompt="Q", answer="New A", tags=["bio", "chem"])


def test_edit_session_submit_requires_text(mock_backend: MagicMock) -> None:
    """Test that an invalid edit is not submitted."""
    mock_backend.update = AsyncMock()
    session = EditSession()
    session.open(Card(id="c1", prompt="Q", answer="A"))
    session.prompt = ""

    assert asyncio.run(session.submit(CardManager(mock_backend))) is None
    assert session.is_open
    mock_backend.update.assert_not_awaited()
