import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, Request, status

from fiszki.api.deps import (
    get_ai_service,
    get_current_user_id,
    get_error_logger,
    get_generations_service,
    read_json_body,
)
from fiszki.core.errors import AIServiceError, ApiError, DatabaseError, StoreError
from fiszki.models.common import ERROR_RESPONSES
from fiszki.models.generation import (
    CreateGenerationCommand,
    CreateGenerationResponse,
    GenerationErrorLogEntry,
)
from fiszki.services.ai_service import AIService
from fiszki.services.error_logger import GenerationErrorLogger
from fiszki.services.generations_service import GenerationsService, compute_hash
from fiszki.validators.flashcard import parse_resource_id
from fiszki.validators.generation import (
    validate_bulk_accept_request,
    validate_create_generation_request,
    validate_source_text_body,
)

router = APIRouter(prefix="/api/generations", tags=["generations"], responses=ERROR_RESPONSES)

logger = logging.getLogger(__name__)


def _unexpected() -> ApiError:
    return ApiError("An unexpected error occurred", "Please try again later", status_code=500)


@router.post(
    "",
    response_model=CreateGenerationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate flashcard proposals from source text"
)
async def create_generation(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    ai_service: AIService = Depends(get_ai_service),
    generations: GenerationsService = Depends(get_generations_service),
    error_logger: GenerationErrorLogger = Depends(get_error_logger),
):
    try:
        body = await read_json_body(request)
        source_text = validate_create_generation_request(body).source_text
        source_text_hash = compute_hash(source_text)
        source_text_length = len(source_text)
        model = ai_service.get_model()

        start_time = time.perf_counter()
        try:
            result = await ai_service.generate_flashcards(source_text)
        except Exception as e:
            logger.warning(f"AI generation failed for user {user_id}: {e}")
            error_logger.log_in_background(GenerationErrorLogEntry(
                user_id=user_id,
                model=model,
                source_text_hash=source_text_hash,
                source_text_length=source_text_length,
                error_code="AI_GENERATION_FAILED",
                error_message=str(e) or "Unknown error",
            ))
            raise AIServiceError(
                "Failed to generate flashcards. Please try again later.",
                "AI_GENERATION_FAILED",
                "AI service encountered an error"
            )
        generation_duration = int((time.perf_counter() - start_time) * 1000)

        command = CreateGenerationCommand(
            user_id=user_id,
            model=model,
            source_text_hash=source_text_hash,
            source_text_length=source_text_length,
            generated_count=result.count,
            generation_duration=generation_duration,
        )

        try:
            generation = await generations.create_generation(command)
        except StoreError as e:
            logger.error(f"Database error while saving generation: {e.message}")
            raise DatabaseError("Database error. Please try again.", "Failed to save generation")

        return CreateGenerationResponse(
            generation_id=generation.id,
            flashcards_proposals=result.proposals,
            generated_count=result.count,
        )
    except ApiError:
        raise
    except Exception:
        logger.exception("Unexpected error in POST /api/generations")
        raise _unexpected()


@router.post("/check-duplicate", summary="Check whether the source text was submitted before")
async def check_duplicate_source(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    generations: GenerationsService = Depends(get_generations_service),
) -> Any:
    try:
        source_text = validate_source_text_body(await read_json_body(request))
        try:
            return {"duplicate": await generations.check_duplicate_source(source_text)}
        except StoreError as e:
            logger.error(f"Error checking duplicate source: {e.message}")
            raise DatabaseError("Internal server error", "Failed to check duplicate source")
    except ApiError:
        raise
    except Exception:
        logger.exception("Unexpected error in POST /api/generations/check-duplicate")
        raise _unexpected()


@router.post("/{generation_id}/accept", summary="Accept reviewed proposals of a generation")
async def accept_flashcards(
    generation_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    generations: GenerationsService = Depends(get_generations_service),
) -> Any:
    try:
        gen_id = parse_resource_id(generation_id, "generation")
        accepted = validate_bulk_accept_request(await read_json_body(request))
        try:
            data = await generations.bulk_accept_flashcards(gen_id, accepted.flashcards)
        except StoreError as e:
            logger.error(f"Error bulk accepting flashcards for generation {gen_id}: {e.message}")
            raise DatabaseError("Internal server error", "Failed to accept flashcards")
        return {"result": data}
    except ApiError:
        raise
    except Exception:
        logger.exception("Unexpected error in POST /api/generations/{id}/accept")
        raise _unexpected()
