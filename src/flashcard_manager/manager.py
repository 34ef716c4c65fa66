"""Optimistic card collection manager.

Local changes are applied to the collection before the backend is called, so
readers see the intended end state right away. When the backend call fails
the change is reverted:

- create: the temporary card is removed
- update: the whole collection is restored from a snapshot taken before the
  patch was applied, then creates and deletes of other cards that settled
  meanwhile are applied again
- delete: the card is reinserted at the head of the collection

Mutations only happen between awaits on the event loop thread, so no locking
is needed. Two operations racing on the same card ID resolve in whatever order
their backend calls settle.
"""

import copy
from collections.abc import Callable, Iterator
from dataclasses import fields

import structlog

from flashcard_manager.backend import Backend
from flashcard_manager.errors import RemoteFailure
from flashcard_manager.models import Card, CardPatch, NewCard, new_temp_id, utcnow

logger = structlog.get_logger()

ErrorHandler = Callable[[RemoteFailure], None]


class CardCollection:
    """Ordered list of cards, most recent first, with at most one card per ID."""

    def __init__(self, cards: list[Card] | None = None) -> None:
        self._cards: list[Card] = []
        for card in cards or []:
            if card.id not in self:
                self._cards.append(card)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards))

    def __contains__(self, card_id: object) -> bool:
        return any(card.id == card_id for card in self._cards)

    @property
    def cards(self) -> list[Card]:
        return list(self._cards)

    def index_of(self, card_id: str) -> int | None:
        for index, card in enumerate(self._cards):
            if card.id == card_id:
                return index
        return None

    def get(self, card_id: str) -> Card | None:
        index = self.index_of(card_id)
        return None if index is None else self._cards[index]

    def prepend(self, card: Card) -> None:
        """Insert a card at the head, dropping any existing card with the same ID."""
        self.remove(card.id)
        self._cards.insert(0, card)

    def replace(self, card_id: str, card: Card) -> bool:
        """Replace the card with ``card_id`` in place. Returns False if absent."""
        index = self.index_of(card_id)
        if index is None:
            return False
        self._cards[index] = card
        return True

    def remove(self, card_id: str) -> Card | None:
        index = self.index_of(card_id)
        if index is None:
            return None
        return self._cards.pop(index)

    def reset(self, cards: list[Card]) -> None:
        self._cards = []
        for card in cards:
            if card.id not in self:
                self._cards.append(card)

    def snapshot(self) -> list[Card]:
        """Deep copy of the current state, for rollback."""
        return copy.deepcopy(self._cards)

    def restore(self, snapshot: list[Card]) -> None:
        self._cards = copy.deepcopy(snapshot)

    def recent(self, limit: int) -> list[Card]:
        return self._cards[:limit]


def _merge(local: Card, remote: Card) -> None:
    """Copy the stored card onto the local one. The remote copy wins for every field."""
    for f in fields(Card):
        setattr(local, f.name, copy.copy(getattr(remote, f.name)))


class CardManager:
    """Keep a local card collection in sync with a backend, optimistically."""

    def __init__(
        self,
        backend: Backend,
        collection: CardCollection | None = None,
        on_error: ErrorHandler | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            backend: Remote store the collection mirrors
            collection: Existing collection to manage (a new empty one by default)
            on_error: Called with each RemoteFailure after its rollback
        """
        self.backend = backend
        self.collection = collection if collection is not None else CardCollection()
        self.on_error = on_error
        self._deleting: set[str] = set()
        # Outcomes of creates and deletes that settle while an update is in flight,
        # re-applied on top of that update's snapshot if it rolls back.
        self._updates_in_flight = 0
        self._settled_creates: dict[str, Card | None] = {}
        self._settled_deletes: dict[str, Card | None] = {}

    @property
    def cards(self) -> list[Card]:
        return self.collection.cards

    @property
    def deleting(self) -> frozenset[str]:
        """IDs with a delete call in flight."""
        return frozenset(self._deleting)

    def is_deleting(self, card_id: str) -> bool:
        return card_id in self._deleting

    def recent(self, limit: int = 5) -> list[Card]:
        return self.collection.recent(limit)

    def _remember(self, settled: dict[str, Card | None], card_id: str, outcome: Card | None) -> None:
        if self._updates_in_flight:
            settled[card_id] = outcome

    def _rollback(self, snapshot: list[Card]) -> None:
        """Restore a snapshot, keeping what other operations settled since it was taken."""
        self.collection.restore(snapshot)
        for temp_id, saved in self._settled_creates.items():
            if temp_id not in self.collection:
                continue
            if saved is None or saved.id in self.collection:
                self.collection.remove(temp_id)
            else:
                self.collection.replace(temp_id, saved)
        for card_id, card in self._settled_deletes.items():
            if card is None:
                self.collection.remove(card_id)
            elif card_id not in self.collection:
                self.collection.prepend(card)
        for card_id in self._deleting:
            self.collection.remove(card_id)

    def _report(self, failure: RemoteFailure) -> None:
        logger.error(
            "Backend call failed, local change rolled back",
            operation=failure.operation,
            card_id=failure.card_id,
            error=str(failure.__cause__),
        )
        if self.on_error is not None:
            self.on_error(failure)

    async def load(self, tag: str | None = None, query: str | None = None, limit: int | None = None) -> list[Card]:
        """Replace the collection with the backend's cards."""
        logger.info("Loading cards", tag=tag, query=query, limit=limit)
        try:
            cards = await self.backend.list_cards(tag=tag, query=query, limit=limit)
        except Exception as e:
            raise RemoteFailure("load", None, e) from e
        self.collection.reset(cards)
        logger.info("Cards loaded", count=len(self.collection))
        return self.collection.cards

    async def create(self, new_card: NewCard) -> Card | None:
        """Create a card, showing it in the collection before the backend confirms.

        Returns:
            The saved card, or None if the backend call failed and was rolled back
        """
        temp_card = Card(
            id=new_temp_id(),
            prompt=new_card.prompt,
            answer=new_card.answer,
            tags=list(new_card.tags),
            created_at=utcnow(),
        )
        self.collection.prepend(temp_card)
        logger.info("Creating card", temp_id=temp_card.id)

        try:
            saved = await self.backend.create(new_card)
        except Exception as e:
            self.collection.remove(temp_card.id)
            self._remember(self._settled_creates, temp_card.id, None)
            self._report(RemoteFailure("create", temp_card.id, e))
            return None

        if not self.collection.replace(temp_card.id, saved):
            # Placeholder was dropped meanwhile (e.g. a reload); keep the saved card visible.
            self.collection.prepend(saved)
        self._remember(self._settled_creates, temp_card.id, saved)
        logger.info("Card created", temp_id=temp_card.id, card_id=saved.id)
        return saved

    async def update(
        self,
        card_id: str,
        patch: CardPatch,
        on_applied: Callable[[Card], None] | None = None,
    ) -> Card | None:
        """Update a card in place before the backend confirms.

        Args:
            card_id: ID of the card to update
            patch: Fields to change
            on_applied: Called right after the optimistic change, before the backend call

        Returns:
            The merged card, or None if the card is unknown or the update was rolled back
        """
        card = self.collection.get(card_id)
        if card is None:
            logger.debug("Update skipped, card not in collection", card_id=card_id)
            return None

        snapshot = self.collection.snapshot()
        try:
            patch.apply(card)
            if on_applied is not None:
                on_applied(card)
        except Exception:
            self.collection.restore(snapshot)
            raise
        logger.info("Updating card", card_id=card_id, fields=list(patch.fields()))

        self._updates_in_flight += 1
        try:
            remote = await self.backend.update(card_id, patch)
        except Exception as e:
            self._rollback(snapshot)
            self._report(RemoteFailure("update", card_id, e))
            return None
        finally:
            self._updates_in_flight -= 1
            if not self._updates_in_flight:
                self._settled_creates.clear()
                self._settled_deletes.clear()

        current = self.collection.get(card_id)
        if current is None:
            logger.debug("Card left the collection during update", card_id=card_id)
            return remote
        _merge(current, remote)
        logger.info("Card updated", card_id=card_id)
        return current

    async def delete(self, card_id: str) -> bool:
        """Remove a card before the backend confirms.

        Returns:
            True if the backend deleted the card, False if skipped or rolled back
        """
        if card_id in self._deleting:
            logger.debug("Delete already in flight", card_id=card_id)
            return False
        card = self.collection.get(card_id)
        if card is None:
            logger.debug("Delete skipped, card not in collection", card_id=card_id)
            return False

        self._deleting.add(card_id)
        try:
            self.collection.remove(card_id)
            logger.info("Deleting card", card_id=card_id)
            try:
                await self.backend.delete(card_id)
            except Exception as e:
                self.collection.prepend(card)
                self._remember(self._settled_deletes, card_id, card)
                self._report(RemoteFailure("delete", card_id, e))
                return False
            self._remember(self._settled_deletes, card_id, None)
            logger.info("Card deleted", card_id=card_id)
            return True
        finally:
            self._deleting.discard(card_id)
