"""Backend implementations."""

from flashcard_manager.backends.file import FileBackend
from flashcard_manager.backends.notion import NotionBackend

__all__ = ["FileBackend", "NotionBackend"]
