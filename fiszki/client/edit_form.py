from typing import Dict, Optional

from fiszki.core.config import (
    FRONT_MAX_LENGTH,
    BACK_MAX_LENGTH,
    SOURCE_TEXT_MIN_LENGTH,
    SOURCE_TEXT_MAX_LENGTH,
)
from fiszki.models.flashcard import FlashcardProposalViewModel


class FlashcardEditForm:
    """Edit state for one AI proposal before it is accepted"""

    def __init__(self, proposal: FlashcardProposalViewModel):
        self.proposal = proposal
        self.front = ""
        self.back = ""
        self.is_valid = False
        self.errors: Dict[str, str] = {}
        self.initialize_form(proposal)

    def _compute_validity(self) -> bool:
        return (
            len(self.front.strip()) > 0
            and len(self.front) <= FRONT_MAX_LENGTH
            and len(self.back.strip()) > 0
            and len(self.back) <= BACK_MAX_LENGTH
        )

    def validate_form(self) -> bool:
        self.is_valid = self._compute_validity()
        return self.is_valid

    def validate_front(self) -> bool:
        if len(self.front) == 0:
            self.errors["front"] = "Przód fiszki jest wymagany"
        elif len(self.front) > FRONT_MAX_LENGTH:
            self.errors["front"] = f"Przód fiszki nie może przekraczać {FRONT_MAX_LENGTH} znaków"
        else:
            self.errors.pop("front", None)
        return self.validate_form()

    def validate_back(self) -> bool:
        if len(self.back) == 0:
            self.errors["back"] = "Tył fiszki jest wymagany"
        elif len(self.back) > BACK_MAX_LENGTH:
            self.errors["back"] = f"Tył fiszki nie może przekraczać {BACK_MAX_LENGTH} znaków"
        else:
            self.errors.pop("back", None)
        return self.validate_form()

    def initialize_form(self, proposal: FlashcardProposalViewModel) -> None:
        """Reset fields and errors from a (new) proposal"""
        self.proposal = proposal
        self.front = proposal.front
        self.back = proposal.back
        self.errors = {}
        self.validate_form()

    def get_edited_proposal(self) -> FlashcardProposalViewModel:
        return self.proposal.model_copy(update={
            "front": self.front.strip(),
            "back": self.back.strip(),
            "is_edited": True,
            "source": "ai-edited",
        })


class SourceTextValidation:
    """Length check for the text submitted to generation"""

    def __init__(self, min_length: int = SOURCE_TEXT_MIN_LENGTH, max_length: int = SOURCE_TEXT_MAX_LENGTH):
        self.min_length = min_length
        self.max_length = max_length
        self.reset()

    def reset(self) -> None:
        self.is_valid = False
        self.character_count = 0
        self.error_message: Optional[str] = None

    def validate_text(self, text: str) -> bool:
        length = len(text.strip())
        self.character_count = length

        if length == 0:
            self.error_message = "Tekst jest wymagany"
        elif length < self.min_length:
            self.error_message = f"Tekst musi mieć co najmniej {self.min_length} znaków (obecnie: {length})"
        elif length > self.max_length:
            self.error_message = f"Tekst nie może przekraczać {self.max_length} znaków (obecnie: {length})"
        else:
            self.error_message = None

        self.is_valid = self.error_message is None
        return self.is_valid
