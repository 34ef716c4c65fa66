"""Backend interface for flashcard storage."""

from abc import ABC, abstractmethod

from flashcard_manager.models import Card, CardPatch, NewCard


class Backend(ABC):
    """Abstract base class for remote flashcard stores.

    Every method is a coroutine. Implementations raise on failure; the
    manager treats any exception as a remote failure and rolls back.
    """

    @abstractmethod
    async def create(self, new_card: NewCard) -> Card:
        """Create a card and return it with its permanent ID."""
        pass

    @abstractmethod
    async def read(self, card_id: str) -> Card:
        """Read a card by ID."""
        pass

    @abstractmethod
    async def update(self, card_id: str, patch: CardPatch) -> Card:
        """Update a card and return the stored result."""
        pass

    @abstractmethod
    async def delete(self, card_id: str) -> None:
        """Delete a card."""
        pass

    @abstractmethod
    async def list_cards(
        self,
        tag: str | None = None,
        query: str | None = None,
        limit: int | None = None,
    ) -> list[Card]:
        """List cards, most recent first.

        Args:
            tag: Only return cards carrying this tag
            query: Case-insensitive substring match on prompt or answer
            limit: Maximum number of cards to return
        """
        pass
