from pydantic import BaseModel
from typing import List, Literal, Optional


class Generation(BaseModel):
    id: int
    user_id: str
    model: str
    source_text_hash: str
    source_text_length: int
    generated_count: int
    generation_duration: int
    accepted_unedited_count: Optional[int] = None
    accepted_edited_count: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CreateGenerationRequest(BaseModel):
    source_text: str


class CreateGenerationCommand(BaseModel):
    user_id: str
    model: str
    source_text_hash: str
    source_text_length: int
    generated_count: int
    generation_duration: int


class GenerationErrorLogEntry(BaseModel):
    user_id: str
    model: str
    source_text_hash: str
    source_text_length: int
    error_code: str
    error_message: str


class FlashcardProposal(BaseModel):
    front: str
    back: str
    source: Literal["ai-full"] = "ai-full"


class AIGenerationResult(BaseModel):
    proposals: List[FlashcardProposal]
    count: int


class CreateGenerationResponse(BaseModel):
    generation_id: int
    flashcards_proposals: List[FlashcardProposal]
    generated_count: int


class AcceptedFlashcard(BaseModel):
    front: str
    back: str
    source: Literal["ai-full", "ai-edited"]


class BulkAcceptRequest(BaseModel):
    flashcards: List[AcceptedFlashcard]
