from typing import Any

from fiszki.core.config import SOURCE_TEXT_MIN_LENGTH, SOURCE_TEXT_MAX_LENGTH
from fiszki.core.errors import ValidationError
from fiszki.models.generation import BulkAcceptRequest, CreateGenerationRequest
from fiszki.models.flashcard import AI_SOURCES


def validate_create_generation_request(body: Any) -> CreateGenerationRequest:
    """Validate the body of POST /api/generations"""
    if not body or not isinstance(body, dict):
        raise ValidationError("Invalid request format", "Request body must be a valid JSON object")

    if "source_text" not in body:
        raise ValidationError("Invalid input", "source_text field is required")

    source_text = body["source_text"]
    if not isinstance(source_text, str):
        raise ValidationError("Invalid input", "source_text must be a string")

    length = len(source_text)
    if length < SOURCE_TEXT_MIN_LENGTH or length > SOURCE_TEXT_MAX_LENGTH:
        raise ValidationError(
            "Invalid input",
            f"source_text must be between {SOURCE_TEXT_MIN_LENGTH} and {SOURCE_TEXT_MAX_LENGTH} characters. "
            f"Received: {length} characters"
        )

    return CreateGenerationRequest(source_text=source_text)


def validate_source_text_body(body: Any) -> str:
    """Only shape checks, used by the duplicate lookup"""
    if not body or not isinstance(body, dict) or not isinstance(body.get("source_text"), str):
        raise ValidationError("Invalid input", "source_text must be a string")
    if not body["source_text"].strip():
        raise ValidationError("Invalid input", "source_text cannot be empty")
    return body["source_text"]


def validate_bulk_accept_request(body: Any) -> BulkAcceptRequest:
    if not body or not isinstance(body, dict):
        raise ValidationError("Invalid JSON format", "Request body must be a valid JSON object")

    flashcards = body.get("flashcards")
    if not isinstance(flashcards, list) or len(flashcards) == 0:
        raise ValidationError("Invalid input", "flashcards must be a non-empty array")

    for index, flashcard in enumerate(flashcards):
        if not isinstance(flashcard, dict):
            raise ValidationError("Invalid flashcard format", f"Flashcard at index {index} must be an object")
        if flashcard.get("source") not in AI_SOURCES:
            raise ValidationError(
                "Invalid source value",
                f"Flashcard at index {index}: source must be one of: {', '.join(AI_SOURCES)}"
            )
        for field in ("front", "back"):
            if not isinstance(flashcard.get(field), str) or not flashcard[field].strip():
                raise ValidationError(
                    "Invalid field value",
                    f"Flashcard at index {index}: {field} cannot be empty"
                )

    return BulkAcceptRequest(**body)
