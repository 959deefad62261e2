import logging
from typing import Any, Dict, List

from fiszki.core.database import FLASHCARDS_TABLE, GENERATIONS_TABLE, execute
from fiszki.core.errors import StoreError, StoreErrorKind
from fiszki.models.flashcard import (
    AI_SOURCES,
    DeleteFlashcardCommand,
    FlashcardCreate,
    UpdateFlashcardCommand,
)

logger = logging.getLogger(__name__)

COUNTER_FIELDS = {
    "ai-full": "accepted_unedited_count",
    "ai-edited": "accepted_edited_count",
}


class FlashcardsService:
    """CRUD over the flashcards table, always scoped to one user"""

    def __init__(self, supabase):
        self.supabase = supabase

    async def get_paginated_flashcards(self, user_id: str, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """Return one page ordered by creation time (newest first) plus the total count"""
        start = (page - 1) * limit
        end = start + limit - 1

        response = await execute(
            self.supabase.table(FLASHCARDS_TABLE)
            .select("*", count="exact")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .range(start, end),
            "get flashcards",
        )

        return {
            "data": response.data or [],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": response.count or 0,
            },
        }

    async def validate_generation_ownership(self, generation_ids: List[int], user_id: str) -> List[int]:
        """Return the subset of generation_ids owned by user_id"""
        response = await execute(
            self.supabase.table(GENERATIONS_TABLE)
            .select("id")
            .in_("id", list(generation_ids))
            .eq("user_id", user_id),
            "validate generation ownership",
        )
        return [generation["id"] for generation in response.data or []]

    async def create_multiple(self, flashcards: List[FlashcardCreate], user_id: str) -> List[Dict[str, Any]]:
        rows = [{**flashcard.model_dump(), "user_id": user_id} for flashcard in flashcards]

        response = await execute(
            self.supabase.table(FLASHCARDS_TABLE).insert(rows),
            "create flashcards",
        )

        if not response.data:
            raise StoreError(StoreErrorKind.INTERNAL, "No flashcards were created")

        logger.info(f"Created {len(response.data)} flashcards for user {user_id}")
        return response.data

    async def update_flashcard(self, command: UpdateFlashcardCommand) -> Dict[str, Any]:
        """Partial update of front/back/source"""
        fields = command.model_dump(exclude={"id", "user_id"}, exclude_none=True)

        response = await execute(
            self.supabase.table(FLASHCARDS_TABLE)
            .update(fields)
            .eq("id", command.id)
            .eq("user_id", command.user_id),
            "update flashcard",
        )

        if not response.data:
            raise StoreError(StoreErrorKind.NOT_FOUND, "Flashcard not found or does not belong to user")

        return response.data[0]

    async def delete_flashcard(self, command: DeleteFlashcardCommand) -> None:
        """Counters are adjusted before the row goes, so a failed adjustment leaves the card in place"""
        response = await execute(
            self.supabase.table(FLASHCARDS_TABLE)
            .select("id, source, generation_id")
            .eq("id", command.id)
            .eq("user_id", command.user_id),
            "fetch flashcard",
        )

        if not response.data:
            raise StoreError(StoreErrorKind.NOT_FOUND, "Flashcard not found or does not belong to user")

        flashcard = response.data[0]
        if flashcard.get("generation_id") and flashcard.get("source") in AI_SOURCES:
            await self._decrement_acceptance(flashcard["generation_id"], flashcard["source"], command.user_id)

        response = await execute(
            self.supabase.table(FLASHCARDS_TABLE)
            .delete()
            .eq("id", command.id)
            .eq("user_id", command.user_id),
            "delete flashcard",
        )

        if not response.data:
            raise StoreError(StoreErrorKind.NOT_FOUND, "Flashcard not found or does not belong to user")

    async def _decrement_acceptance(self, generation_id: int, source: str, user_id: str) -> None:
        """Keep the generation's accepted counters in line after removing one of its cards"""
        counter_field = COUNTER_FIELDS[source]

        response = await execute(
            self.supabase.table(GENERATIONS_TABLE)
            .select("accepted_unedited_count, accepted_edited_count")
            .eq("id", generation_id)
            .eq("user_id", user_id),
            "fetch generation data",
        )
        if not response.data:
            logger.warning(f"Generation {generation_id} not found while updating counters")
            return

        current = response.data[0].get(counter_field) or 0
        await execute(
            self.supabase.table(GENERATIONS_TABLE)
            .update({counter_field: max(0, current - 1)})
            .eq("id", generation_id)
            .eq("user_id", user_id),
            "update generation statistics",
        )
