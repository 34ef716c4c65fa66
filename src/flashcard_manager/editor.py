"""Form state for creating and editing cards."""

from dataclasses import dataclass, field

import structlog

from flashcard_manager.errors import ValidationError
from flashcard_manager.manager import CardManager
from flashcard_manager.models import Card, CardPatch, NewCard
from flashcard_manager.tags import merge_tags, parse_tag_input

logger = structlog.get_logger()


def _can_save(prompt: str, answer: str) -> bool:
    return bool(prompt.strip()) and bool(answer.strip())


@dataclass
class CardDraft:
    """State of the manual create form."""

    prompt: str = ""
    answer: str = ""
    tags: list[str] = field(default_factory=list)
    tag_input: str = ""
    flipped: bool = False
    saving: bool = False

    @property
    def can_save(self) -> bool:
        return _can_save(self.prompt, self.answer)

    def add_tags_from_input(self) -> None:
        parsed = parse_tag_input(self.tag_input)
        if not parsed:
            return
        self.tags = merge_tags(self.tags, parsed)
        self.tag_input = ""

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    def flip(self) -> None:
        self.flipped = not self.flipped

    def reset(self) -> None:
        self.prompt = ""
        self.answer = ""
        self.tags = []
        self.tag_input = ""
        self.flipped = False

    def to_new_card(self) -> NewCard:
        if not self.can_save:
            raise ValidationError("prompt and answer are required")
        return NewCard(prompt=self.prompt.strip(), answer=self.answer.strip(), tags=list(self.tags))

    async def save(self, manager: CardManager) -> Card | None:
        """Submit the draft. The form is cleared only if the card was saved."""
        if not self.can_save or self.saving:
            return None

        new_card = self.to_new_card()
        self.flipped = False
        self.saving = True
        try:
            saved = await manager.create(new_card)
        finally:
            self.saving = False

        if saved is not None:
            self.reset()
        return saved


@dataclass
class EditSession:
    """State of the edit dialog for a single card."""

    card: Card | None = None
    prompt: str = ""
    answer: str = ""
    tags: list[str] = field(default_factory=list)
    tag_input: str = ""

    @property
    def is_open(self) -> bool:
        return self.card is not None

    @property
    def can_save(self) -> bool:
        return self.is_open and _can_save(self.prompt, self.answer)

    def open(self, card: Card) -> None:
        self.card = card
        self.prompt = card.prompt
        self.answer = card.answer
        self.tags = list(card.tags)
        self.tag_input = ""

    def close(self, *_: object) -> None:
        self.card = None
        self.prompt = ""
        self.answer = ""
        self.tags = []
        self.tag_input = ""

    def add_tags_from_input(self) -> None:
        parsed = parse_tag_input(self.tag_input)
        if not parsed:
            return
        self.tags = merge_tags(self.tags, parsed)
        self.tag_input = ""

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    async def submit(self, manager: CardManager) -> Card | None:
        """Send the edit. The dialog closes as soon as the change is applied locally."""
        if not self.can_save:
            return None

        card_id = self.card.id
        patch = CardPatch(prompt=self.prompt.strip(), answer=self.answer.strip(), tags=list(self.tags))
        logger.debug("Submitting edit", card_id=card_id)
        return await manager.update(card_id, patch, on_applied=self.close)
