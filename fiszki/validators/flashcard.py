from typing import Any, Dict, Mapping

from fiszki.core.config import (
    FRONT_MAX_LENGTH,
    BACK_MAX_LENGTH,
    MAX_FLASHCARDS_PER_REQUEST,
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
)
from fiszki.core.errors import ValidationError
from fiszki.models.flashcard import (
    AI_SOURCES,
    VALID_SOURCES,
    CreateFlashcardsRequest,
    FlashcardCreate,
    FlashcardListQuery,
    FlashcardUpdate,
)


def _is_positive_int(value: Any) -> bool:
    # JSON 3.0 is the integer 3
    if isinstance(value, float):
        return value.is_integer() and value > 0
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _parse_int(value: Any):
    """Leading-digits integer parse; None when nothing numeric is found"""
    text = str(value).strip()
    digits = ""
    for i, char in enumerate(text):
        if char.isdigit() or (i == 0 and char in "+-"):
            digits += char
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None


def validate_create_flashcards_request(body: Any) -> CreateFlashcardsRequest:
    """Validate the body of POST /api/flashcards"""
    if not body or not isinstance(body, dict):
        raise ValidationError("Invalid JSON format", "Request body must be a valid JSON object")

    if "flashcards" not in body:
        raise ValidationError("Missing required field: flashcards", "flashcards field is required")

    flashcards = body["flashcards"]

    if not isinstance(flashcards, list):
        raise ValidationError("Invalid input", "flashcards must be an array")

    if len(flashcards) == 0:
        raise ValidationError(
            "Flashcards array cannot be empty",
            "At least one flashcard must be provided"
        )

    if len(flashcards) > MAX_FLASHCARDS_PER_REQUEST:
        raise ValidationError(
            "Too many flashcards",
            f"Maximum {MAX_FLASHCARDS_PER_REQUEST} flashcards allowed per request. Received: {len(flashcards)}"
        )

    return CreateFlashcardsRequest(
        flashcards=[_validate_single_flashcard(flashcard, index) for index, flashcard in enumerate(flashcards)]
    )


def _validate_text_field(flashcard: Mapping, field: str, max_length: int, index: int) -> str:
    if field not in flashcard:
        raise ValidationError(
            "Missing required field",
            f"Flashcard at index {index} is missing required field: {field}"
        )

    value = flashcard[field]
    if not isinstance(value, str):
        raise ValidationError("Invalid field type", f"Flashcard at index {index}: {field} must be a string")

    if len(value) == 0:
        raise ValidationError("Invalid field value", f"Flashcard at index {index}: {field} cannot be empty")

    if len(value) > max_length:
        raise ValidationError(
            "Field exceeds maximum length",
            f"Flashcard at index {index}: {field} exceeds maximum length of {max_length} characters. "
            f"Received: {len(value)}"
        )

    return value.strip()


def _validate_single_flashcard(flashcard: Any, index: int) -> FlashcardCreate:
    if not flashcard or not isinstance(flashcard, dict):
        raise ValidationError("Invalid flashcard format", f"Flashcard at index {index} must be an object")

    front = _validate_text_field(flashcard, "front", FRONT_MAX_LENGTH, index)
    back = _validate_text_field(flashcard, "back", BACK_MAX_LENGTH, index)

    if "source" not in flashcard:
        raise ValidationError(
            "Missing required field",
            f"Flashcard at index {index} is missing required field: source"
        )

    source = flashcard["source"]
    if source not in VALID_SOURCES:
        raise ValidationError(
            "Invalid source value",
            f"Flashcard at index {index}: source must be one of: {', '.join(VALID_SOURCES)}. Received: {source}"
        )

    generation_id = flashcard.get("generation_id")

    if source in AI_SOURCES:
        if generation_id is None:
            raise ValidationError(
                "Invalid generation_id for source type",
                f"Flashcard at index {index}: generation_id is required for source type '{source}'"
            )
        if not _is_positive_int(generation_id):
            raise ValidationError(
                "Invalid generation_id for source type",
                f"Flashcard at index {index}: generation_id must be a positive integer for source type '{source}'"
            )
    elif generation_id is not None:
        raise ValidationError(
            "Invalid generation_id for source type",
            f"Flashcard at index {index}: generation_id must be null for source type 'manual'"
        )

    return FlashcardCreate(
        front=front,
        back=back,
        source=source,
        generation_id=int(generation_id) if source in AI_SOURCES else None,
    )


def validate_update_flashcard_request(body: Any) -> FlashcardUpdate:
    """Validate the body of PUT /api/flashcards/{id}; at least one field is required"""
    if not body or not isinstance(body, dict):
        raise ValidationError("Invalid JSON format", "Request body must be a valid JSON object")

    if not any(field in body for field in ("front", "back", "source")):
        raise ValidationError(
            "Missing required fields",
            "At least one field (front, back, or source) must be provided for update"
        )

    validated: Dict[str, Any] = {}

    for field, max_length in (("front", FRONT_MAX_LENGTH), ("back", BACK_MAX_LENGTH)):
        if field not in body:
            continue
        value = body[field]
        if not isinstance(value, str):
            raise ValidationError("Invalid field type", f"{field} must be a string")
        if len(value) == 0:
            raise ValidationError("Invalid field value", f"{field} cannot be empty")
        if len(value) > max_length:
            raise ValidationError(
                "Field exceeds maximum length",
                f"{field} exceeds maximum length of {max_length} characters. Received: {len(value)}"
            )
        validated[field] = value.strip()

    if "source" in body:
        if body["source"] not in VALID_SOURCES:
            raise ValidationError(
                "Invalid source value",
                f"source must be one of: {', '.join(VALID_SOURCES)}. Received: {body['source']}"
            )
        validated["source"] = body["source"]

    return FlashcardUpdate(**validated)


def validate_flashcard_list_query(query: Any) -> FlashcardListQuery:
    """Validate page/limit of GET /api/flashcards, applying defaults"""
    validated = FlashcardListQuery(page=1, limit=DEFAULT_PAGE_LIMIT)

    if not query or not isinstance(query, Mapping):
        return validated

    if query.get("page") is not None:
        page = _parse_int(query["page"])
        if page is None or page < 1:
            raise ValidationError(
                "Invalid page parameter",
                "page must be a positive integer starting from 1"
            )
        validated.page = page

    if query.get("limit") is not None:
        limit = _parse_int(query["limit"])
        if limit is None or limit < 1 or limit > MAX_PAGE_LIMIT:
            raise ValidationError(
                "Invalid limit parameter",
                f"limit must be a positive integer between 1 and {MAX_PAGE_LIMIT}"
            )
        validated.limit = limit

    return validated


def parse_resource_id(raw_id: Any, label: str = "flashcard") -> int:
    """Validate an {id} path parameter"""
    if raw_id is None or str(raw_id) == "":
        raise ValidationError(f"Missing {label} ID", 'Path parameter "id" is required')

    resource_id = _parse_int(raw_id)
    if resource_id is None or resource_id <= 0:
        raise ValidationError(f"Invalid {label} ID", "ID must be a positive integer")

    return resource_id
