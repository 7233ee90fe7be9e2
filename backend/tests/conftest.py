"""Shared fixtures: a fresh store per test, on each backend, plus an API client."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from pharmacy.core.config import Settings
from pharmacy.main import create_app
from pharmacy.storage import MemoryStorage, SqlStorage


@pytest_asyncio.fixture(params=["memory", "sql"])
async def storage(request):
    """Every store test runs against both backends."""
    if request.param == "memory":
        store = MemoryStorage()
    else:
        store = SqlStorage("sqlite+aiosqlite://")
    await store.init()
    yield store
    await store.close()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def settings():
    return Settings(SEED_DEMO_DATA=False, STORAGE_BACKEND="memory")


@pytest.fixture
def client(settings, memory_storage):
    app = create_app(settings, memory_storage)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
