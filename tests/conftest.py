"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set testing environment before importing app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AUTH_MODE"] = "psk"
os.environ["AUTH_PSK_TOKENS"] = "alice-token:alice,bob-token:bob"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with the schema created."""
    from src.models.database import Base
    from src.models.orm import SavedPrompt  # noqa: F401

    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """A single session for store-level tests."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def service(session_maker):
    """SavedPromptService bound to the test database."""
    from src.services.saved_prompt import SavedPromptService

    return SavedPromptService(session_factory=session_maker)


# =============================================================================
# App and Client Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def app(service) -> AsyncGenerator[FastAPI, None]:
    """FastAPI app with the saved prompt service bound to the test database."""
    from src.main import app as fastapi_app
    from src.services.saved_prompt import get_saved_prompt_service

    fastapi_app.dependency_overrides[get_saved_prompt_service] = lambda: service
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def alice_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer alice-token"}


@pytest.fixture
def bob_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer bob-token"}


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def greeting() -> dict:
    """Sample saved prompt payload."""
    return {"name": "Greeting", "content": "Hello!"}
