"""CLI for flashcard manager."""

import asyncio
import sys
from typing import Annotated, Literal

import structlog
from cyclopts import App, Parameter

from flashcard_manager.backend import Backend
from flashcard_manager.backends import FileBackend, NotionBackend
from flashcard_manager.config import CONFIG_DIR_NAME, get_config
from flashcard_manager.config_commands import config_app
from flashcard_manager.errors import RemoteFailure
from flashcard_manager.manager import CardCollection, CardManager
from flashcard_manager.models import Card, CardPatch, NewCard
from flashcard_manager.tags import parse_tag_input
from flashcard_manager.theme_commands import theme_app
from flashcard_manager.viewer import CLOSE, CardViewer

logger = structlog.get_logger()

app = App(
    help="Flashcards - create, edit and study flashcards",
)

app.command(config_app)
app.command(theme_app)

# Single-letter shortcuts for the study prompt
STUDY_KEYS = {"": " ", "f": " ", "n": "right", "p": "left", "q": "escape"}


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def get_backend() -> Backend:
    """Get the configured backend."""
    config = get_config()
    backend_type = config.get("backend", "file")

    if backend_type == "file":
        path = config.get("file.path", f"{CONFIG_DIR_NAME}/cards.yaml")
        return FileBackend(path=path)
    elif backend_type == "notion":
        token = config.get("notion.token")
        database_id = config.get("notion.database_id")
        if not token or not database_id:
            raise ValueError(
                "Notion token and database not configured. Set them using:\n"
                "  flashcards config set notion.token <token>\n"
                "  flashcards config set notion.database_id <database_id>"
            )
        return NotionBackend(token=token, database_id=database_id)
    else:
        raise ValueError(f"Unknown backend: {backend_type}")


def _print_error(failure: RemoteFailure) -> None:
    print(f"Error: {failure}", file=sys.stderr)


def _format_card(card: Card) -> str:
    tags_str = f" [{', '.join(card.tags)}]" if card.tags else ""
    return f"{card.id}: {card.prompt}{tags_str}"


async def _manager_for(backend: Backend, card_id: str) -> CardManager:
    card = await backend.read(card_id)
    return CardManager(backend, CardCollection([card]), on_error=_print_error)


@app.command
def create(prompt: str, answer: str, tags: str = "") -> None:
    """Create a new card.

    Args:
        prompt: Front side of the card
        answer: Back side of the card
        tags: Comma or space separated tags
    """
    new_card = NewCard(prompt=prompt.strip(), answer=answer.strip(), tags=parse_tag_input(tags))
    manager = CardManager(get_backend(), on_error=_print_error)

    card = asyncio.run(manager.create(new_card))
    if card is None:
        sys.exit(1)
    print(f"Created card {card.id}: {card.prompt}")


@app.command
def show(card_id: str) -> None:
    """Show a card by ID."""
    card = asyncio.run(get_backend().read(card_id))

    print(f"Card: {card.id}")
    print(f"Prompt: {card.prompt}")
    print(f"Answer: {card.answer}")
    if card.tags:
        print(f"Tags: {', '.join(card.tags)}")
    print(f"Created: {card.created_at.isoformat()}")


@app.command
def update(
    card_id: str,
    prompt: str | None = None,
    answer: str | None = None,
    tags: str | None = None,
) -> None:
    """Update a card. Tags given here replace the existing tags."""
    patch = CardPatch(
        prompt=prompt.strip() if prompt is not None else None,
        answer=answer.strip() if answer is not None else None,
        tags=parse_tag_input(tags) if tags is not None else None,
    )

    async def run() -> Card | None:
        manager = await _manager_for(get_backend(), card_id)
        return await manager.update(card_id, patch)

    card = asyncio.run(run())
    if card is None:
        sys.exit(1)
    print(f"Updated card {card.id}: {card.prompt}")


@app.command
def delete(*card_ids: str) -> None:
    """Delete one or more cards."""
    backend = get_backend()
    card_ids = tuple(dict.fromkeys(card_ids))

    async def run() -> int:
        manager = CardManager(backend, on_error=_print_error)
        for card_id in card_ids:
            manager.collection.prepend(await backend.read(card_id))
        results = await asyncio.gather(*(manager.delete(card_id) for card_id in card_ids))
        return sum(results)

    deleted = asyncio.run(run())
    print(f"Deleted {deleted} card(s)")
    if deleted != len(card_ids):
        sys.exit(1)


@app.command(name="list")
def list_cards(
    tag: str | None = None,
    query: str | None = None,
    limit: int | None = None,
) -> None:
    """List cards, newest first."""
    manager = CardManager(get_backend())
    cards = asyncio.run(manager.load(tag=tag, query=query, limit=limit))

    print(f"Found {len(cards)} card(s):\n")
    for card in cards:
        print(_format_card(card))


@app.command
def study(tag: str | None = None, start: int = 1) -> None:
    """Study cards in a flip-card viewer.

    Keys: Enter or f flips, n next, p previous, q quits.
    """
    manager = CardManager(get_backend())
    cards = asyncio.run(manager.load(tag=tag))
    viewer = CardViewer(cards, initial_index=start - 1)

    if viewer.current is None:
        print("No cards to study")
        return

    while True:
        side = "Answer" if viewer.flipped else "Prompt"
        print(f"\n[{viewer.position}] {side}: {viewer.face}")
        if viewer.current.tags:
            print(f"Tags: {', '.join(viewer.current.tags)}")
        try:
            key = input("(f)lip (n)ext (p)rev (q)uit > ").strip().lower()
        except EOFError:
            break
        if viewer.handle_key(STUDY_KEYS.get(key, key)) == CLOSE:
            break


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    app(tokens)


if __name__ == "__main__":
    app.meta()
