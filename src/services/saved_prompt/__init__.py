"""Saved prompt store and caller-scoped service."""

from src.services.saved_prompt.service import (
    SavedPromptService,
    SavedPromptData,
    get_saved_prompt_service,
)
from src.services.saved_prompt.store import SavedPromptStore, permitted_fields

__all__ = [
    "SavedPromptService",
    "SavedPromptData",
    "SavedPromptStore",
    "get_saved_prompt_service",
    "permitted_fields",
]
