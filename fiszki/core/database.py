import logging
from typing import Any, AsyncIterator

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AsyncClientOptions, acreate_client

from fiszki.core.config import SUPABASE_URL, SUPABASE_KEY
from fiszki.core.errors import StoreError, StoreErrorKind, is_upstream_unavailable

logger = logging.getLogger(__name__)

# Tables
FLASHCARDS_TABLE = "flashcards"
GENERATIONS_TABLE = "generations"
GENERATION_ERROR_LOGS_TABLE = "generation_error_logs"

# Remote procedures
CHECK_DUPLICATE_SOURCE_RPC = "check_duplicate_source"
BULK_ACCEPT_FLASHCARDS_RPC = "bulk_accept_flashcards"

# PostgREST code for "no rows" on single-object requests
NO_ROWS_CODE = "PGRST116"


async def create_supabase_client() -> AsyncClient:
    """Create a request-scoped Supabase client that keeps no session of its own"""
    return await acreate_client(
        SUPABASE_URL,
        SUPABASE_KEY,
        options=AsyncClientOptions(persist_session=False, auto_refresh_token=False),
    )


async def close_supabase_client(client: AsyncClient) -> None:
    """Close the HTTP sessions held by the PostgREST and auth clients"""
    for name, close in (("postgrest", client.postgrest.aclose), ("auth", client.auth.close)):
        try:
            await close()
        except Exception as e:
            logger.warning(f"Failed to close Supabase {name} session: {e}")


async def get_supabase() -> AsyncIterator[AsyncClient]:
    """FastAPI dependency; one client per request, closed when the request is done"""
    client = await create_supabase_client()
    try:
        yield client
    finally:
        await close_supabase_client(client)


async def execute(query: Any, action: str) -> Any:
    """Run a PostgREST query and translate failures into tagged StoreErrors"""
    try:
        return await query.execute()
    except APIError as e:
        if e.code == NO_ROWS_CODE:
            raise StoreError(StoreErrorKind.NOT_FOUND, f"Failed to {action}: {e.message}") from e
        kind = StoreErrorKind.UNAVAILABLE if is_upstream_unavailable(e) else StoreErrorKind.INTERNAL
        raise StoreError(kind, f"Failed to {action}: {e.message}") from e
    except httpx.TransportError as e:
        logger.error(f"Supabase unreachable while trying to {action}: {e}")
        raise StoreError(StoreErrorKind.UNAVAILABLE, f"Failed to {action}: {e}") from e
