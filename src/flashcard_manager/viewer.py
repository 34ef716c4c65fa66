"""Flip-card viewer navigation."""

from flashcard_manager.models import Card

CLOSE = "close"

KEY_ACTIONS = {
    " ": "flip",
    "space": "flip",
    "right": "next",
    "left": "prev",
    "escape": CLOSE,
}


class CardViewer:
    """Step through a deck one card at a time, flipping between prompt and answer.

    The index is always clamped to the deck bounds, and the card is turned back
    to its prompt side whenever the index changes.
    """

    def __init__(self, cards: list[Card], initial_index: int = 0) -> None:
        self._cards = list(cards)
        self.index = self._clamp(initial_index)
        self.flipped = False

    def _clamp(self, index: int) -> int:
        return min(max(index, 0), max(len(self._cards) - 1, 0))

    @property
    def cards(self) -> list[Card]:
        return list(self._cards)

    @property
    def total(self) -> int:
        return len(self._cards)

    @property
    def current(self) -> Card | None:
        if not self._cards:
            return None
        return self._cards[self.index]

    @property
    def at_start(self) -> bool:
        return self.index <= 0

    @property
    def at_end(self) -> bool:
        return self.index >= self.total - 1

    @property
    def position(self) -> str:
        if not self._cards:
            return "0 / 0"
        return f"{self.index + 1} / {self.total}"

    @property
    def face(self) -> str:
        """Text currently showing: the answer when flipped, otherwise the prompt."""
        card = self.current
        if card is None:
            return ""
        return card.answer if self.flipped else card.prompt

    def go_to(self, index: int) -> None:
        new_index = self._clamp(index)
        if new_index != self.index:
            self.index = new_index
            self.flipped = False

    def next(self) -> None:
        self.go_to(self.index + 1)

    def prev(self) -> None:
        self.go_to(self.index - 1)

    def flip(self) -> None:
        if self.current is not None:
            self.flipped = not self.flipped

    def set_cards(self, cards: list[Card], index: int | None = None) -> None:
        """Swap the deck, keeping the index in bounds."""
        self._cards = list(cards)
        target = self.index if index is None else index
        self.index = self._clamp(target)
        self.flipped = False

    def handle_key(self, key: str) -> str | None:
        """Apply a key press. Returns the action taken, or None for unbound keys."""
        action = KEY_ACTIONS.get(key if key == " " else key.strip().lower())
        if action == "flip":
            self.flip()
        elif action == "next":
            self.next()
        elif action == "prev":
            self.prev()
        return action
