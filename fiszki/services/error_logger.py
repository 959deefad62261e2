import asyncio
import logging
from typing import Set

from fiszki.core.database import GENERATION_ERROR_LOGS_TABLE
from fiszki.models.generation import GenerationErrorLogEntry

logger = logging.getLogger(__name__)

# Strong references so scheduled writes are not garbage collected mid-flight
_background_tasks: Set[asyncio.Task] = set()


class GenerationErrorLogger:
    """
    Stores AI generation failures for debugging and monitoring.
    Logging must never interrupt the error that is being reported, so
    nothing raised here ever reaches the caller.
    """

    def __init__(self, supabase):
        self.supabase = supabase

    async def log(self, entry: GenerationErrorLogEntry) -> None:
        try:
            await self.supabase.table(GENERATION_ERROR_LOGS_TABLE).insert(entry.model_dump()).execute()
        except Exception as e:
            logger.error(f"Failed to log generation error: {e}")

    def log_in_background(self, entry: GenerationErrorLogEntry) -> asyncio.Task:
        """Schedule log() without joining it into the caller's flow"""
        task = asyncio.create_task(self.log(entry))
        _background_tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        _background_tasks.discard(task)
        if task.cancelled():
            logger.warning("Generation error log task was cancelled")
        elif task.exception() is not None:
            logger.error(f"Exception during error logging: {task.exception()}")
