from pydantic import BaseModel
from typing import List, Literal, Optional

FlashcardSource = Literal["manual", "ai-full", "ai-edited"]

VALID_SOURCES: List[str] = ["ai-full", "ai-edited", "manual"]
AI_SOURCES = ("ai-full", "ai-edited")


class Flashcard(BaseModel):
    id: int
    user_id: str
    front: str
    back: str
    source: FlashcardSource
    generation_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FlashcardCreate(BaseModel):
    front: str
    back: str
    source: FlashcardSource
    generation_id: Optional[int] = None


class CreateFlashcardsRequest(BaseModel):
    flashcards: List[FlashcardCreate]


class FlashcardUpdate(BaseModel):
    front: Optional[str] = None
    back: Optional[str] = None
    source: Optional[FlashcardSource] = None


class FlashcardListQuery(BaseModel):
    page: int = 1
    limit: int = 10


class UpdateFlashcardCommand(FlashcardUpdate):
    id: int
    user_id: str


class DeleteFlashcardCommand(BaseModel):
    id: int
    user_id: str


class Pagination(BaseModel):
    page: int
    limit: int
    total: int


class PaginatedFlashcardsResponse(BaseModel):
    data: List[Flashcard]
    pagination: Pagination


class CreateFlashcardsResponse(BaseModel):
    flashcards: List[Flashcard]


class FlashcardProposalViewModel(BaseModel):
    """Candidate flashcard under review on the client, never persisted as-is"""
    id: str
    front: str
    back: str
    is_edited: bool = False
    source: FlashcardSource = "ai-full"
    is_accepted: bool = False
    is_rejected: bool = False
