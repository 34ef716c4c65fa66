"""Data models for flashcard manager."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from flashcard_manager.errors import ValidationError
from flashcard_manager.tags import normalize_tags

TEMP_ID_PREFIX = "temp-"


def new_temp_id() -> str:
    """Generate a placeholder ID for a card not yet saved remotely."""
    return f"{TEMP_ID_PREFIX}{uuid.uuid4()}"


def is_temp_id(card_id: str) -> bool:
    """Return True if the ID is a client-side placeholder."""
    return card_id.startswith(TEMP_ID_PREFIX)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_text(name: str, value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required")
    return value


@dataclass
class Card:
    """A flashcard as held in the local collection."""

    id: str
    prompt: str
    answer: str
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.tags = normalize_tags(self.tags)


@dataclass
class NewCard:
    """Validated input for creating a card."""

    prompt: str
    answer: str
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _require_text("prompt", self.prompt)
        _require_text("answer", self.answer)
        self.tags = normalize_tags(self.tags)


@dataclass
class CardPatch:
    """Partial update for a card. Fields left as None are unchanged."""

    prompt: str | None = None
    answer: str | None = None
    tags: list[str] | None = None

    def __post_init__(self) -> None:
        if self.prompt is not None:
            _require_text("prompt", self.prompt)
        if self.answer is not None:
            _require_text("answer", self.answer)
        if self.tags is not None:
            self.tags = normalize_tags(self.tags)

    def fields(self) -> dict[str, object]:
        """Return only the fields this patch sets."""
        values = {"prompt": self.prompt, "answer": self.answer, "tags": self.tags}
        return {key: value for key, value in values.items() if value is not None}

    def apply(self, card: Card) -> None:
        """Apply the patch to a card in place."""
        for key, value in self.fields().items():
            setattr(card, key, list(value) if key == "tags" else value)
