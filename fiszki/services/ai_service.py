import logging
from typing import Any, Dict, List

from fiszki.core.config import FRONT_MAX_LENGTH, BACK_MAX_LENGTH
from fiszki.core.errors import OpenRouterError
from fiszki.models.generation import AIGenerationResult, FlashcardProposal
from fiszki.services.openrouter import OpenRouterClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = f"""You are an expert educational content creator.
Create concise flashcards from the study material provided by the user.
Each flashcard has a "front" (a clear, specific question, at most {FRONT_MAX_LENGTH} characters)
and a "back" (an accurate answer, at most {BACK_MAX_LENGTH} characters).
Each card should focus on ONE concept or fact.
Write the flashcards in the language of the source text."""

FLASHCARDS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "flashcards": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "front": {"type": "string"},
                    "back": {"type": "string"},
                },
                "required": ["front", "back"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["flashcards"],
    "additionalProperties": False,
}


class AIService:
    """Turns source text into flashcard proposals through OpenRouter"""

    def __init__(self, client: OpenRouterClient):
        self.client = client

    def get_model(self) -> str:
        return self.client.get_model()

    async def generate_flashcards(self, source_text: str) -> AIGenerationResult:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": source_text},
        ]
        data = await self.client.generate_structured_response(messages, "flashcards", FLASHCARDS_SCHEMA)

        raw_cards = data.get("flashcards", []) if isinstance(data, dict) else []
        proposals = self._to_proposals(raw_cards)
        if not proposals:
            raise OpenRouterError("AI response did not contain any valid flashcards")

        logger.info(f"Generated {len(proposals)} flashcard proposals")
        return AIGenerationResult(proposals=proposals, count=len(proposals))

    @staticmethod
    def _to_proposals(raw_cards: List[Any]) -> List[FlashcardProposal]:
        proposals = []
        for card in raw_cards:
            if not isinstance(card, dict):
                continue
            front = str(card.get("front") or "").strip()
            back = str(card.get("back") or "").strip()
            if not front or not back or len(front) > FRONT_MAX_LENGTH or len(back) > BACK_MAX_LENGTH:
                logger.warning("Dropping flashcard proposal outside length bounds")
                continue
            proposals.append(FlashcardProposal(front=front, back=back))
        return proposals
