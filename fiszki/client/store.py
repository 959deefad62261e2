import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from fiszki.core.config import DEFAULT_PAGE_LIMIT

logger = logging.getLogger(__name__)

FLASHCARDS_PATH = "/api/flashcards"


class FlashcardStore:
    """
    Client-side cache of the current page of flashcards.

    Mutations are sent to the API and then mirrored into the cached page
    instead of re-fetching it.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client
        self.flashcards: List[Dict[str, Any]] = []
        self.current_page = 1
        self.total_pages = 0
        self.total = 0
        self.limit = DEFAULT_PAGE_LIMIT
        self.loading = False
        self.error: Optional[str] = None

    @staticmethod
    def _error_message(error: Exception) -> str:
        if isinstance(error, httpx.HTTPStatusError):
            try:
                body = error.response.json()
                return body.get("error") or body.get("details") or str(error)
            except ValueError:
                return str(error)
        return str(error)

    def _recompute_pages(self) -> None:
        self.total_pages = math.ceil(self.total / self.limit) if self.limit else 0

    async def fetch_flashcards(self, page: Optional[int] = None, limit: Optional[int] = None) -> None:
        params = {}
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit

        self.loading = True
        self.error = None
        try:
            response = await self.http_client.get(FLASHCARDS_PATH, params=params)
            response.raise_for_status()
            body = response.json()

            pagination = body["pagination"]
            self.flashcards = body["data"]
            self.current_page = pagination["page"]
            self.limit = pagination["limit"]
            self.total = pagination["total"]
            self._recompute_pages()
        except Exception as e:
            self.error = self._error_message(e)
            logger.error(f"Error fetching flashcards: {self.error}")
            raise
        finally:
            self.loading = False

    async def update_flashcard(self, flashcard_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        self.error = None
        try:
            response = await self.http_client.put(f"{FLASHCARDS_PATH}/{flashcard_id}", json=updates)
            response.raise_for_status()
        except Exception as e:
            self.error = self._error_message(e)
            logger.error(f"Error updating flashcard {flashcard_id}: {self.error}")
            raise

        updated = response.json()
        self.flashcards = [updated if card["id"] == flashcard_id else card for card in self.flashcards]
        return updated

    async def delete_flashcard(self, flashcard_id: int) -> None:
        self.error = None
        try:
            response = await self.http_client.delete(f"{FLASHCARDS_PATH}/{flashcard_id}")
            response.raise_for_status()
        except Exception as e:
            self.error = self._error_message(e)
            logger.error(f"Error deleting flashcard {flashcard_id}: {self.error}")
            raise

        remaining = [card for card in self.flashcards if card["id"] != flashcard_id]
        if len(remaining) < len(self.flashcards):
            self.total = max(0, self.total - 1)
        self.flashcards = remaining
        self._recompute_pages()
