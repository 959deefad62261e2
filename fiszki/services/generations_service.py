import hashlib
import logging
from typing import Any, Dict, List, Optional

from fiszki.core.database import (
    GENERATIONS_TABLE,
    CHECK_DUPLICATE_SOURCE_RPC,
    BULK_ACCEPT_FLASHCARDS_RPC,
    execute,
)
from fiszki.core.errors import StoreError, StoreErrorKind, UnauthorizedError
from fiszki.models.generation import AcceptedFlashcard, CreateGenerationCommand, Generation

logger = logging.getLogger(__name__)


def compute_hash(text: str) -> str:
    """SHA-256 hex digest of the source text, used for duplicate detection"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class GenerationsService:
    def __init__(self, supabase):
        self.supabase = supabase

    async def create_generation(self, command: CreateGenerationCommand) -> Generation:
        """Insert one generation row and return it"""
        if not command.user_id:
            raise UnauthorizedError(details="User must be logged in to create generations")

        response = await execute(
            self.supabase.table(GENERATIONS_TABLE).insert(command.model_dump()),
            "create generation",
        )

        if not response.data:
            raise StoreError(StoreErrorKind.INTERNAL, "No data returned from generation insert")

        generation = Generation(**response.data[0])
        logger.info(f"Generation {generation.id} saved for user {command.user_id}")
        return generation

    async def check_duplicate_source(self, source_text: str) -> Any:
        response = await execute(
            self.supabase.rpc(CHECK_DUPLICATE_SOURCE_RPC, {"p_source_text_hash": compute_hash(source_text)}),
            "check duplicate source",
        )
        return response.data

    async def bulk_accept_flashcards(self, generation_id: int, flashcards: List[AcceptedFlashcard]) -> Any:
        """Insert accepted proposals and bump the counters in one remote procedure"""
        response = await execute(
            self.supabase.rpc(
                BULK_ACCEPT_FLASHCARDS_RPC,
                {
                    "p_generation_id": generation_id,
                    "p_flashcards": [flashcard.model_dump() for flashcard in flashcards],
                },
            ),
            "bulk accept flashcards",
        )
        return response.data

    async def update_generation_stats(
        self,
        generation_id: int,
        user_id: str,
        accepted_unedited: int,
        accepted_edited: int,
    ) -> Optional[Dict[str, Any]]:
        response = await execute(
            self.supabase.table(GENERATIONS_TABLE)
            .update({
                "accepted_unedited_count": accepted_unedited,
                "accepted_edited_count": accepted_edited,
            })
            .eq("id", generation_id)
            .eq("user_id", user_id),
            "update generation stats",
        )

        if not response.data:
            raise StoreError(StoreErrorKind.NOT_FOUND, "Generation not found or does not belong to user")

        return response.data[0]
