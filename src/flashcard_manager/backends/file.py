"""YAML file backend implementation."""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
import yaml

from flashcard_manager.backend import Backend
from flashcard_manager.errors import NotFoundError
from flashcard_manager.models import Card, CardPatch, NewCard, utcnow
from flashcard_manager.tags import sanitize_tag

logger = structlog.get_logger()


class FileBackend(Backend):
    """Store cards in a single YAML file.

    The file holds a mapping with a ``cards`` list. Every call reads the file
    and every mutation rewrites it.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize file backend.

        Args:
            path: Path to the YAML file (created on first write)
        """
        self.path = Path(path)
        logger.debug("File backend initialized", path=str(self.path))

    def _load(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error("Failed to parse card file", path=str(self.path), error=str(e))
            raise ValueError(f"Failed to load cards from {self.path}: {e}") from e
        return list(data.get("cards", []))

    def _save(self, records: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.safe_dump({"cards": records}, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        logger.debug("Card file saved", path=str(self.path), count=len(records))

    def _record_to_card(self, record: dict[str, Any]) -> Card:
        created_at = record.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return Card(
            id=str(record["id"]),
            prompt=record.get("prompt", ""),
            answer=record.get("answer", ""),
            tags=list(record.get("tags") or []),
            created_at=created_at or utcnow(),
        )

    def _card_to_record(self, card: Card) -> dict[str, Any]:
        return {
            "id": card.id,
            "prompt": card.prompt,
            "answer": card.answer,
            "tags": list(card.tags),
            "created_at": card.created_at.isoformat(),
        }

    def _find(self, records: list[dict[str, Any]], card_id: str) -> int:
        for index, record in enumerate(records):
            if str(record.get("id")) == card_id:
                return index
        raise NotFoundError(card_id)

    async def create(self, new_card: NewCard) -> Card:
        """Append a card to the file."""
        records = self._load()
        card = Card(
            id=uuid.uuid4().hex,
            prompt=new_card.prompt,
            answer=new_card.answer,
            tags=list(new_card.tags),
            created_at=utcnow(),
        )
        records.append(self._card_to_record(card))
        self._save(records)
        logger.info("Card stored", card_id=card.id)
        return card

    async def read(self, card_id: str) -> Card:
        records = self._load()
        return self._record_to_card(records[self._find(records, card_id)])

    async def update(self, card_id: str, patch: CardPatch) -> Card:
        records = self._load()
        index = self._find(records, card_id)
        card = self._record_to_card(records[index])
        patch.apply(card)
        records[index] = self._card_to_record(card)
        self._save(records)
        logger.info("Card updated in file", card_id=card_id)
        return card

    async def delete(self, card_id: str) -> None:
        records = self._load()
        del records[self._find(records, card_id)]
        self._save(records)
        logger.info("Card removed from file", card_id=card_id)

    async def list_cards(
        self,
        tag: str | None = None,
        query: str | None = None,
        limit: int | None = None,
    ) -> list[Card]:
        """List stored cards, newest first."""
        cards = [self._record_to_card(record) for record in self._load()]
        cards.sort(key=lambda card: card.created_at, reverse=True)

        if tag:
            tag = sanitize_tag(tag)
            cards = [card for card in cards if tag in card.tags]
        if query:
            needle = query.lower()
            cards = [card for card in cards if needle in card.prompt.lower() or needle in card.answer.lower()]
        if limit:
            cards = cards[:limit]

        logger.debug("Listed cards from file", count=len(cards))
        return cards
