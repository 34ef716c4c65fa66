"""Flashcard manager - optimistic flashcard collections over remote stores."""

from flashcard_manager.manager import CardCollection, CardManager
from flashcard_manager.models import Card, CardPatch, NewCard

__all__ = ["Card", "CardCollection", "CardManager", "CardPatch", "NewCard"]
__version__ = "0.1.0"
