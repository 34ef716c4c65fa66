"""Exceptions raised by flashcard manager."""


class FlashcardError(Exception):
    """Base class for flashcard manager errors."""


class ValidationError(FlashcardError, ValueError):
    """Input failed required-field checks."""


class NotFoundError(FlashcardError, KeyError):
    """A card with the given ID does not exist."""

    def __init__(self, card_id: str) -> None:
        super().__init__(card_id)
        self.card_id = card_id

    def __str__(self) -> str:
        return f"Card not found: {self.card_id}"


class RemoteFailure(FlashcardError):
    """A backend call failed and the optimistic change was rolled back."""

    def __init__(self, operation: str, card_id: str | None, cause: BaseException) -> None:
        super().__init__(f"{operation} failed for card {card_id or '<new>'}: {cause}")
        self.operation = operation
        self.card_id = card_id
        self.__cause__ = cause
