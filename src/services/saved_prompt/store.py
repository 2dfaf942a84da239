"""Persistence and validation for saved prompts.

The store works on a single ``AsyncSession`` handed in by the caller and never
decides who the caller is. Every lookup takes the owner as an argument, so a
prompt that belongs to somebody else is indistinguishable from one that does
not exist.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationError
from src.models.orm.saved_prompt import SavedPrompt

# Fields a client may change on update; anything else is dropped
MUTABLE_FIELDS = ("name", "content")

BLANK_MESSAGE = "can't be blank"


def permitted_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only the allow-listed mutable fields from a submitted mapping."""
    return {key: fields[key] for key in MUTABLE_FIELDS if key in fields}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_saved_prompt(owner: Optional[str], name: Any, content: Any) -> None:
    """Check presence of every required field.

    Raises:
        ValidationError: With one detail entry per failing field
    """
    details = []
    for field, value in (("name", name), ("content", content), ("owner", owner)):
        if _is_blank(value):
            details.append({"field": field, "message": BLANK_MESSAGE})
        elif not isinstance(value, str):
            details.append({"field": field, "message": "must be a string"})

    if details:
        summary = ", ".join(f"{d['field']} {d['message']}" for d in details)
        raise ValidationError(f"Validation failed: {summary}", details=details)


def _parse_id(prompt_id: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    if isinstance(prompt_id, uuid.UUID):
        return prompt_id
    try:
        return uuid.UUID(str(prompt_id))
    except ValueError:
        return None


class SavedPromptStore:
    """CRUD operations on the saved_prompts table."""

    RESOURCE = "Saved prompt"

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, owner: str, name: str, content: str) -> SavedPrompt:
        """Insert a new saved prompt owned by ``owner``.

        Raises:
            ValidationError: If name, content or owner is blank
        """
        validate_saved_prompt(owner, name, content)

        now = datetime.now(timezone.utc)
        prompt = SavedPrompt(
            owner_id=owner,
            name=name,
            content=content,
            created_at=now,
            updated_at=now,
        )
        self._session.add(prompt)
        await self._session.commit()
        await self._session.refresh(prompt)
        return prompt

    async def update(self, record: SavedPrompt, fields: Mapping[str, Any]) -> SavedPrompt:
        """Apply a partial update to ``record``.

        Only ``name`` and ``content`` are taken from ``fields``. The merged
        result is validated before anything is written, so a rejected update
        leaves the record untouched.

        Raises:
            ValidationError: If the merged name or content is blank
        """
        changes = permitted_fields(fields)
        validate_saved_prompt(
            record.owner_id,
            changes.get("name", record.name),
            changes.get("content", record.content),
        )

        for key, value in changes.items():
            setattr(record, key, value)
        record.updated_at = datetime.now(timezone.utc)

        await self._session.commit()
        await self._session.refresh(record)
        return record

    async def delete(self, record: SavedPrompt) -> None:
        """Permanently delete ``record``."""
        await self._session.delete(record)
        await self._session.commit()

    async def find_by_id(self, owner: str, prompt_id: Union[str, uuid.UUID]) -> SavedPrompt:
        """Fetch one prompt by ID, restricted to ``owner``.

        Raises:
            NotFoundError: If the ID is malformed, unknown, or owned by someone else
        """
        parsed = _parse_id(prompt_id)
        if parsed is None or not owner:
            raise NotFoundError(self.RESOURCE, str(prompt_id))

        result = await self._session.execute(
            select(SavedPrompt).where(
                SavedPrompt.id == parsed,
                SavedPrompt.owner_id == owner,
            )
        )
        prompt = result.scalar_one_or_none()

        if prompt is None:
            raise NotFoundError(self.RESOURCE, str(prompt_id))
        return prompt

    async def list_by_owner(self, owner: str) -> List[SavedPrompt]:
        """All prompts of ``owner``, newest first."""
        result = await self._session.execute(
            select(SavedPrompt)
            .where(SavedPrompt.owner_id == owner)
            .order_by(SavedPrompt.created_at.desc())
        )
        return list(result.scalars().all())
