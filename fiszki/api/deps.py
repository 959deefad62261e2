import logging
from typing import Any, Optional

from fastapi import Depends, Request
from supabase import AuthApiError, AuthRetryableError

from fiszki.core.config import AUTH_COOKIE_NAME, OPENROUTER_API_KEY, OPENROUTER_MODEL
from fiszki.core.database import get_supabase
from fiszki.core.errors import (
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
    is_upstream_unavailable,
)
from fiszki.models.openrouter import OpenRouterConfig
from fiszki.services.ai_service import AIService
from fiszki.services.error_logger import GenerationErrorLogger
from fiszki.services.flashcards_service import FlashcardsService
from fiszki.services.generations_service import GenerationsService
from fiszki.services.openrouter import OpenRouterClient

logger = logging.getLogger(__name__)


async def read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON format", "Request body must be valid JSON")


def extract_access_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the auth cookie"""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get(AUTH_COOKIE_NAME) or None


async def get_current_user_id(request: Request, supabase=Depends(get_supabase)) -> str:
    """Resolve the user behind the request's session or raise UnauthorizedError"""
    token = extract_access_token(request)
    if not token:
        raise UnauthorizedError()

    try:
        response = await supabase.auth.get_user(token)
    except AuthRetryableError as e:
        logger.error(f"Supabase auth unreachable: {e.message}")
        raise UpstreamUnavailableError("Service unavailable", "Authentication service is unreachable")
    except AuthApiError as e:
        logger.info(f"Rejected session token: {e.message}")
        raise UnauthorizedError(details="Invalid or expired session")
    except Exception as e:
        if is_upstream_unavailable(e):
            raise UpstreamUnavailableError("Service unavailable", "Authentication service is unreachable")
        raise

    if not response or not response.user:
        raise UnauthorizedError(details="Invalid or expired session")

    # Table queries run as this user so row-level security applies
    supabase.postgrest.auth(token)
    return response.user.id


def get_flashcards_service(supabase=Depends(get_supabase)) -> FlashcardsService:
    return FlashcardsService(supabase)


def get_generations_service(supabase=Depends(get_supabase)) -> GenerationsService:
    return GenerationsService(supabase)


def get_error_logger(supabase=Depends(get_supabase)) -> GenerationErrorLogger:
    return GenerationErrorLogger(supabase)


def get_ai_service(request: Request) -> AIService:
    client = OpenRouterClient(
        api_key=OPENROUTER_API_KEY,
        http_client=request.app.state.http_client,
        config=OpenRouterConfig(default_model=OPENROUTER_MODEL),
    )
    return AIService(client)
