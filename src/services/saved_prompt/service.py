"""Caller-scoped saved prompt operations.

Every method takes the caller's subject as its first argument. The subject
comes from the auth dependency of the request, never from the request body,
and is used as the owner filter for every query the store runs.

Usage:
    from src.services.saved_prompt import get_saved_prompt_service

    service = get_saved_prompt_service()

    created = await service.create("alice", name="Greeting", content="Hello!")
    prompts = await service.list("alice")
    await service.update("alice", created.id, {"content": "Hi!"})
    await service.delete("alice", created.id)
"""

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, AsyncContextManager, AsyncIterator, Callable, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationError
from src.models.database import get_db_context
from src.models.orm.saved_prompt import SavedPrompt
from src.observability.logging import LogContext, get_logger, log_event
from src.observability.metrics import metrics
from src.services.saved_prompt.store import SavedPromptStore

logger = get_logger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]


@dataclass
class SavedPromptData:
    """Data transfer object for a saved prompt.

    Copied out of the ORM row so that callers never hold a live, session-bound
    object.
    """

    id: str
    name: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_orm(cls, prompt: SavedPrompt) -> "SavedPromptData":
        """Create a SavedPromptData snapshot from an ORM SavedPrompt."""
        return cls(
            id=str(prompt.id),
            name=prompt.name,
            content=prompt.content,
            owner_id=prompt.owner_id,
            created_at=prompt.created_at,
            updated_at=prompt.updated_at,
        )


class SavedPromptService:
    """Service exposing saved prompt CRUD scoped to the calling user.

    Each call opens its own session, so every operation is a single atomic
    step with nothing shared between requests except the engine.
    """

    def __init__(self, session_factory: SessionFactory = get_db_context):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _operation(self, operation: str, owner: str) -> AsyncIterator[None]:
        """Scope logging context and record metrics for one operation."""
        start = time.perf_counter()
        outcome = "success"
        with LogContext(owner_id=owner, operation=operation):
            try:
                yield
            except NotFoundError:
                outcome = "not_found"
                raise
            except ValidationError:
                outcome = "invalid"
                raise
            except Exception:
                outcome = "error"
                logger.exception(f"Saved prompt {operation} failed")
                raise
            finally:
                metrics.record_operation(operation, outcome, time.perf_counter() - start)

    async def list(self, owner: str) -> List[SavedPromptData]:
        """List the caller's prompts, newest first."""
        async with self._operation("list", owner):
            async with self._session_factory() as db:
                prompts = await SavedPromptStore(db).list_by_owner(owner)
                return [SavedPromptData.from_orm(p) for p in prompts]

    async def get(self, owner: str, prompt_id: str) -> SavedPromptData:
        """Get one of the caller's prompts.

        Raises:
            NotFoundError: If the caller has no prompt with this ID
        """
        async with self._operation("get", owner):
            async with self._session_factory() as db:
                prompt = await SavedPromptStore(db).find_by_id(owner, prompt_id)
                return SavedPromptData.from_orm(prompt)

    async def create(
        self,
        owner: str,
        name: Optional[str],
        content: Optional[str],
    ) -> SavedPromptData:
        """Create a prompt owned by the caller.

        Raises:
            ValidationError: If name or content is blank
        """
        async with self._operation("create", owner):
            async with self._session_factory() as db:
                prompt = await SavedPromptStore(db).create(owner, name, content)
                log_event(logger, logging.INFO, "Created saved prompt", prompt_id=str(prompt.id))
                return SavedPromptData.from_orm(prompt)

    async def update(
        self,
        owner: str,
        prompt_id: str,
        fields: Mapping[str, Any],
    ) -> SavedPromptData:
        """Partially update one of the caller's prompts.

        Only ``name`` and ``content`` are applied; other keys are ignored.

        Raises:
            NotFoundError: If the caller has no prompt with this ID
            ValidationError: If the update would blank name or content
        """
        async with self._operation("update", owner):
            async with self._session_factory() as db:
                store = SavedPromptStore(db)
                prompt = await store.find_by_id(owner, prompt_id)
                prompt = await store.update(prompt, fields)
                log_event(logger, logging.INFO, "Updated saved prompt", prompt_id=str(prompt.id))
                return SavedPromptData.from_orm(prompt)

    async def delete(self, owner: str, prompt_id: str) -> None:
        """Delete one of the caller's prompts.

        Raises:
            NotFoundError: If the caller has no prompt with this ID
        """
        async with self._operation("delete", owner):
            async with self._session_factory() as db:
                store = SavedPromptStore(db)
                prompt = await store.find_by_id(owner, prompt_id)
                await store.delete(prompt)
                log_event(logger, logging.INFO, "Deleted saved prompt", prompt_id=str(prompt_id))


# Singleton instance
_saved_prompt_service: Optional[SavedPromptService] = None


def get_saved_prompt_service() -> SavedPromptService:
    """Get the singleton saved prompt service instance."""
    global _saved_prompt_service
    if _saved_prompt_service is None:
        _saved_prompt_service = SavedPromptService()
    return _saved_prompt_service
