"""Tests for the caller-scoped saved prompt service."""

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from src.core.exceptions import NotFoundError, ValidationError


@pytest.mark.unit
class TestSavedPromptData:
    """Tests for SavedPromptData dataclass."""

    def test_from_orm(self):
        """Test creating SavedPromptData from ORM model."""
        from src.models.orm.saved_prompt import SavedPrompt
        from src.services.saved_prompt import SavedPromptData

        now = datetime.now(timezone.utc)
        prompt_id = uuid.uuid4()

        orm_prompt = MagicMock(spec=SavedPrompt)
        orm_prompt.id = prompt_id
        orm_prompt.name = "Greeting"
        orm_prompt.content = "Hello!"
        orm_prompt.owner_id = "alice"
        orm_prompt.created_at = now
        orm_prompt.updated_at = now

        data = SavedPromptData.from_orm(orm_prompt)

        assert data.id == str(prompt_id)
        assert data.name == "Greeting"
        assert data.content == "Hello!"
        assert data.owner_id == "alice"
        assert data.created_at == now


@pytest.mark.unit
class TestSavedPromptService:
    """Tests for SavedPromptService against the test database."""

    async def test_create_forces_owner(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        assert created.name == "Greeting"
        assert created.content == "Hello!"
        assert created.owner_id == "alice"
        uuid.UUID(created.id)

    async def test_owner_can_get(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        fetched = await service.get("alice", created.id)

        assert fetched == created

    async def test_other_user_cannot_get(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        with pytest.raises(NotFoundError):
            await service.get("bob", created.id)

    async def test_other_user_cannot_update(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        with pytest.raises(NotFoundError):
            await service.update("bob", created.id, {"content": "Hijacked"})

        assert (await service.get("alice", created.id)).content == "Hello!"

    async def test_other_user_cannot_delete(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        with pytest.raises(NotFoundError):
            await service.delete("bob", created.id)

        assert (await service.get("alice", created.id)).name == "Greeting"

    async def test_unknown_id(self, service):
        missing = str(uuid.uuid4())

        with pytest.raises(NotFoundError):
            await service.get("alice", missing)
        with pytest.raises(NotFoundError):
            await service.update("alice", missing, {"name": "x"})
        with pytest.raises(NotFoundError):
            await service.delete("alice", missing)

    async def test_create_invalid_creates_nothing(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.create("alice", name="", content="x")

        assert "name" in exc_info.value.fields
        assert await service.list("alice") == []

    async def test_create_missing_content(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.create("alice", name="Greeting", content=None)

        assert exc_info.value.fields == ["content"]

    async def test_update_content_only(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        updated = await service.update("alice", created.id, {"content": "Updated"})

        assert updated.content == "Updated"
        assert updated.name == "Greeting"
        assert updated.updated_at >= created.updated_at

    async def test_update_ignores_unrecognized_fields(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        updated = await service.update(
            "alice",
            created.id,
            {"name": "Renamed", "owner_id": "bob", "is_public": True},
        )

        assert updated.name == "Renamed"
        assert updated.owner_id == "alice"
        with pytest.raises(NotFoundError):
            await service.get("bob", created.id)

    async def test_update_invalid_leaves_record(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        with pytest.raises(ValidationError):
            await service.update("alice", created.id, {"name": ""})

        assert (await service.get("alice", created.id)).name == "Greeting"

    async def test_delete_twice(self, service):
        created = await service.create("alice", name="Greeting", content="Hello!")

        await service.delete("alice", created.id)

        with pytest.raises(NotFoundError):
            await service.delete("alice", created.id)
        assert await service.list("alice") == []

    async def test_list_only_own_prompts(self, service):
        await service.create("alice", name="A1", content="a")
        await service.create("bob", name="B1", content="b")
        await service.create("alice", name="A2", content="a")

        alice_prompts = await service.list("alice")
        bob_prompts = await service.list("bob")

        assert {p.name for p in alice_prompts} == {"A1", "A2"}
        assert [p.name for p in bob_prompts] == ["B1"]

    async def test_list_is_a_fresh_snapshot(self, service):
        first = await service.list("alice")
        await service.create("alice", name="Later", content="x")
        second = await service.list("alice")

        assert first == []
        assert [p.name for p in second] == ["Later"]


@pytest.mark.unit
class TestSavedPromptServiceMetrics:
    """Operations are counted by outcome."""

    async def test_records_outcomes(self, service):
        with patch("src.services.saved_prompt.service.metrics") as mock_metrics:
            created = await service.create("alice", name="Greeting", content="Hello!")
            with pytest.raises(NotFoundError):
                await service.get("bob", created.id)
            with pytest.raises(ValidationError):
                await service.create("alice", name="", content="")

        outcomes = [
            (c.args[0], c.args[1]) for c in mock_metrics.record_operation.call_args_list
        ]
        assert outcomes == [
            ("create", "success"),
            ("get", "not_found"),
            ("create", "invalid"),
        ]


@pytest.mark.unit
class TestGetSavedPromptService:
    """Tests for the service singleton."""

    def test_singleton(self):
        from src.services.saved_prompt import get_saved_prompt_service

        assert get_saved_prompt_service() is get_saved_prompt_service()
