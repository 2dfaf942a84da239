"""Saved prompt ORM model.

A saved prompt is a named text snippet that belongs to exactly one user.
Users are managed by the identity provider; ``owner_id`` stores the caller's
subject as issued by it, so there is no local users table to join against.

Example usage:
    prompt = SavedPrompt(owner_id="alice", name="Greeting", content="Hello!")
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.models.database import Base


class SavedPrompt(Base):
    """A user-owned, named prompt.

    Attributes:
        id: UUID primary key, assigned on creation
        name: Display name, never blank
        content: Prompt text, never blank
        owner_id: Subject of the user who created the prompt
        created_at: When this prompt was created
        updated_at: When this prompt was last modified
    """

    __tablename__ = "saved_prompts"
    __table_args__ = (
        Index("idx_saved_prompts_owner_id", "owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for this saved prompt"
    )

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Display name chosen by the owner"
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="The prompt text"
    )

    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Subject of the owning user, from the auth context"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When this prompt was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        comment="When this prompt was last modified"
    )

    def __repr__(self) -> str:
        """Return a string representation for debugging."""
        return f"<SavedPrompt {self.id} owner={self.owner_id}>"
