"""SQLAlchemy ORM models."""

from src.models.orm.saved_prompt import SavedPrompt

__all__ = [
    "SavedPrompt",
]
