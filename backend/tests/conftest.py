"""
Notes API: Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (isolated stores, API client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_settings: Settings for environment="test" (no seeding)
    ├── store: Empty InMemoryNoteStore
    ├── seeded_store: InMemoryNoteStore holding notes A, B, C (C newest)
    ├── app: FastAPI app built around `store`
    └── test_client: HTTPX AsyncClient for API endpoint testing
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Override settings for testing BEFORE any app imports
# Why: the module-level app in notes_api.main is built on import
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from notes_api.config import Settings  # noqa: E402
from notes_api.main import create_app  # noqa: E402
from notes_api.models.note import Note  # noqa: E402
from notes_api.storage.memory import InMemoryNoteStore  # noqa: E402


@pytest.fixture
def test_settings():
    return Settings(environment="test", log_level="WARNING", seed_sample_data=False)


@pytest.fixture
def store():
    return InMemoryNoteStore()


@pytest_asyncio.fixture
async def seeded_store(store):
    """Store holding notes A, B and C, created in that order."""
    for title in ("A", "B", "C"):
        await store.insert(Note.create(title=title, content=f"content {title}"))
    return store


@pytest.fixture
def app(test_settings, store):
    return create_app(settings=test_settings, store=store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     Uses ASGITransport to route requests directly to the app.
             The lifespan does not run; the in-memory store needs no setup.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
