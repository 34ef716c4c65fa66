"""Notion backend implementation using notion-client."""

from datetime import datetime
from typing import Any

import structlog
from notion_client import APIErrorCode, APIResponseError, AsyncClient

from flashcard_manager.backend import Backend
from flashcard_manager.errors import NotFoundError
from flashcard_manager.models import Card, CardPatch, NewCard, utcnow

logger = structlog.get_logger()

PROMPT_PROPERTY = "Prompt"
ANSWER_PROPERTY = "Answer"
TAGS_PROPERTY = "Tags"

MAX_PAGE_SIZE = 100


def _parse_timestamp(value: str | None) -> datetime:
    if not value:
        return utcnow()
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class NotionBackend(Backend):
    """Notion-based backend using database pages as cards.

    The database needs a title property named "Prompt", a rich text property
    named "Answer" and a multi-select property named "Tags".
    """

    def __init__(self, token: str, database_id: str) -> None:
        """Initialize Notion backend.

        Args:
            token: Notion integration token
            database_id: Notion database ID holding the cards
        """
        self.token = token
        self.database_id = database_id

        if not self.token:
            raise ValueError("Notion token required")
        if not self.database_id:
            raise ValueError("Notion database_id required")

        logger.debug("Initializing Notion backend", database_id=database_id)
        self.client = AsyncClient(auth=self.token)
        logger.info("Notion backend initialized", database_id=database_id)

    def _parse_properties(self, properties: dict[str, Any]) -> dict[str, Any]:
        """Parse Notion properties into simple values."""
        parsed = {}
        for key, value in properties.items():
            prop_type = value.get("type")

            if prop_type == "title":
                parsed[key] = "".join(t.get("plain_text", "") for t in value.get("title", []))
            elif prop_type == "rich_text":
                parsed[key] = "".join(t.get("plain_text", "") for t in value.get("rich_text", []))
            elif prop_type == "multi_select":
                parsed[key] = [item.get("name") for item in value.get("multi_select", [])]
            else:
                parsed[key] = value

        return parsed

    def _page_to_card(self, page: dict[str, Any]) -> Card:
        """Convert Notion page to Card."""
        logger.debug("Converting Notion page to card", page_id=page["id"])
        properties = self._parse_properties(page.get("properties", {}))

        tags = properties.get(TAGS_PROPERTY) or []
        card = Card(
            id=page["id"],
            prompt=properties.get(PROMPT_PROPERTY) or "",
            answer=properties.get(ANSWER_PROPERTY) or "",
            tags=[tag for tag in tags if isinstance(tag, str)],
            created_at=_parse_timestamp(page.get("created_time")),
        )
        return card

    def _build_properties(
        self,
        prompt: str | None = None,
        answer: str | None = None,
        tags: list[str] | None = None,
    ) -> dict[str, Any]:
        """Build Notion properties object."""
        properties: dict[str, Any] = {}

        if prompt is not None:
            properties[PROMPT_PROPERTY] = {"title": [{"text": {"content": prompt}}]}

        if answer is not None:
            properties[ANSWER_PROPERTY] = {"rich_text": [{"text": {"content": answer}}]}

        if tags is not None:
            properties[TAGS_PROPERTY] = {"multi_select": [{"name": tag} for tag in tags]}

        return properties

    async def _call(self, card_id: str, request: Any) -> dict[str, Any]:
        try:
            return await request
        except APIResponseError as e:
            if e.code == APIErrorCode.ObjectNotFound:
                raise NotFoundError(card_id) from e
            raise

    async def create(self, new_card: NewCard) -> Card:
        """Create a new Notion page in the database."""
        logger.info("Creating Notion page", tags=new_card.tags)

        properties = self._build_properties(prompt=new_card.prompt, answer=new_card.answer, tags=new_card.tags)
        response = await self.client.pages.create(parent={"database_id": self.database_id}, properties=properties)

        card = self._page_to_card(response)
        logger.info("Notion page created", card_id=card.id)
        return card

    async def read(self, card_id: str) -> Card:
        """Read a Notion page by ID."""
        logger.info("Reading Notion page", card_id=card_id)
        page = await self._call(card_id, self.client.pages.retrieve(page_id=card_id))
        return self._page_to_card(page)

    async def update(self, card_id: str, patch: CardPatch) -> Card:
        """Update a Notion page."""
        logger.info("Updating Notion page", card_id=card_id, fields=list(patch.fields()))

        properties = self._build_properties(prompt=patch.prompt, answer=patch.answer, tags=patch.tags)
        page = await self._call(card_id, self.client.pages.update(page_id=card_id, properties=properties))

        card = self._page_to_card(page)
        logger.info("Notion page updated successfully", card_id=card_id)
        return card

    async def delete(self, card_id: str) -> None:
        """Delete (archive) a Notion page."""
        logger.info("Archiving Notion page", card_id=card_id)
        await self._call(card_id, self.client.pages.update(page_id=card_id, archived=True))
        logger.info("Notion page archived", card_id=card_id)

    def _build_filter(self, tag: str | None, query: str | None) -> dict[str, Any] | None:
        conditions: list[dict[str, Any]] = []
        if tag:
            conditions.append({"property": TAGS_PROPERTY, "multi_select": {"contains": tag}})
        if query:
            conditions.append(
                {
                    "or": [
                        {"property": PROMPT_PROPERTY, "title": {"contains": query}},
                        {"property": ANSWER_PROPERTY, "rich_text": {"contains": query}},
                    ]
                }
            )

        if not conditions:
            return None
        if len(conditions) == 1:
            return conditions[0]
        return {"and": conditions}

    async def list_cards(
        self,
        tag: str | None = None,
        query: str | None = None,
        limit: int | None = None,
    ) -> list[Card]:
        """List pages in the database, newest first."""
        logger.info("Listing Notion pages", tag=tag, query=query, limit=limit)

        query_params: dict[str, Any] = {
            "database_id": self.database_id,
            "sorts": [{"timestamp": "created_time", "direction": "descending"}],
            "page_size": min(limit, MAX_PAGE_SIZE) if limit else MAX_PAGE_SIZE,
        }
        notion_filter = self._build_filter(tag, query)
        if notion_filter is not None:
            query_params["filter"] = notion_filter

        cards: list[Card] = []
        while True:
            response = await self.client.databases.query(**query_params)
            for page in response.get("results", []):
                cards.append(self._page_to_card(page))
                if limit and len(cards) >= limit:
                    logger.info("Listed Notion pages", count=len(cards))
                    return cards

            if not response.get("has_more"):
                break
            query_params["start_cursor"] = response["next_cursor"]

        logger.info("Listed Notion pages", count=len(cards))
        return cards
