import logging

from fastapi import APIRouter, Depends, Request, status

from fiszki.api.deps import get_current_user_id, get_flashcards_service, read_json_body
from fiszki.core.errors import ApiError, NotFoundError, StoreError, StoreErrorKind, ValidationError
from fiszki.models.common import ERROR_RESPONSES, ApiMessage
from fiszki.models.flashcard import (
    AI_SOURCES,
    CreateFlashcardsResponse,
    DeleteFlashcardCommand,
    Flashcard,
    PaginatedFlashcardsResponse,
    UpdateFlashcardCommand,
)
from fiszki.services.flashcards_service import FlashcardsService
from fiszki.validators.flashcard import (
    parse_resource_id,
    validate_create_flashcards_request,
    validate_flashcard_list_query,
    validate_update_flashcard_request,
)

router = APIRouter(prefix="/api/flashcards", tags=["flashcards"], responses=ERROR_RESPONSES)

logger = logging.getLogger(__name__)


def _internal_error(details: str) -> ApiError:
    return ApiError("Internal server error", details, status_code=500)


def _not_found() -> NotFoundError:
    return NotFoundError(
        "Flashcard not found",
        "Flashcard does not exist or does not belong to the authenticated user"
    )


@router.get("", response_model=PaginatedFlashcardsResponse, summary="List the user's flashcards, newest first")
async def list_flashcards(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardsService = Depends(get_flashcards_service),
):
    try:
        query = validate_flashcard_list_query(request.query_params)

        try:
            return await service.get_paginated_flashcards(user_id, page=query.page, limit=query.limit)
        except StoreError as e:
            logger.error(f"Error getting paginated flashcards: {e.message}")
            raise _internal_error("Failed to retrieve flashcards")
    except ApiError:
        raise
    except Exception:
        logger.exception("Unexpected error in flashcards GET endpoint")
        raise _internal_error("An unexpected error occurred")


@router.post(
    "",
    response_model=CreateFlashcardsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create one or more flashcards"
)
async def create_flashcards(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardsService = Depends(get_flashcards_service),
):
    try:
        body = await read_json_body(request)
        validated = validate_create_flashcards_request(body)

        # Every generation_id of an AI card must belong to the caller, else nothing is inserted
        generation_ids = list(dict.fromkeys(
            flashcard.generation_id
            for flashcard in validated.flashcards
            if flashcard.source in AI_SOURCES and flashcard.generation_id is not None
        ))
        if generation_ids:
            try:
                owned = set(await service.validate_generation_ownership(generation_ids, user_id))
            except StoreError as e:
                logger.error(f"Error validating generation ownership: {e.message}")
                raise _internal_error("Failed to validate generation ownership")

            invalid_ids = [generation_id for generation_id in generation_ids if generation_id not in owned]
            if invalid_ids:
                raise ValidationError(
                    "Invalid generation_id for source type",
                    f"Generation IDs do not belong to user: {', '.join(str(i) for i in invalid_ids)}"
                )

        try:
            created = await service.create_multiple(validated.flashcards, user_id)
        except StoreError as e:
            logger.error(f"Error creating flashcards: {e.message}")
            raise _internal_error("Failed to create flashcards")

        return {"flashcards": created}
    except ApiError:
        raise
    except Exception:
        logger.exception("Unexpected error in flashcards POST endpoint")
        raise _internal_error("An unexpected error occurred")


@router.put("/{flashcard_id}", response_model=Flashcard, summary="Update a flashcard")
async def update_flashcard(
    flashcard_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardsService = Depends(get_flashcards_service),
):
    try:
        card_id = parse_resource_id(flashcard_id)
        body = await read_json_body(request)

        try:
            update = validate_update_flashcard_request(body)
        except ValidationError as e:
            raise ValidationError("Invalid input", e.details or e.error)

        command = UpdateFlashcardCommand(id=card_id, user_id=user_id, **update.model_dump(exclude_none=True))

        try:
            return await service.update_flashcard(command)
        except StoreError as e:
            if e.kind == StoreErrorKind.NOT_FOUND:
                raise _not_found()
            logger.error(f"Error updating flashcard {card_id}: {e.message}")
            raise _internal_error("Failed to update flashcard")
    except ApiError:
        raise
    except Exception:
        logger.exception("Unexpected error in update flashcard endpoint")
        raise _internal_error("An unexpected error occurred")


@router.delete("/{flashcard_id}", response_model=ApiMessage, summary="Delete a flashcard")
async def delete_flashcard(
    flashcard_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardsService = Depends(get_flashcards_service),
):
    try:
        card_id = parse_resource_id(flashcard_id)

        try:
            await service.delete_flashcard(DeleteFlashcardCommand(id=card_id, user_id=user_id))
        except StoreError as e:
            if e.kind == StoreErrorKind.NOT_FOUND:
                raise _not_found()
            logger.error(f"Error deleting flashcard {card_id}: {e.message}")
            raise _internal_error("Failed to delete flashcard")

        return {"message": "Flashcard deleted successfully"}
    except ApiError:
        raise
    except Exception:
        logger.exception("Unexpected error in delete flashcard endpoint")
        raise _internal_error("An unexpected error occurred")
