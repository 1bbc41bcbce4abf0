"""API test fixtures — httpx client over the ASGI app with the store swapped per test.

Invariants:
    - app.state.db_manager starts as None every test (ASGITransport skips the lifespan)
    - dependency_overrides and settings cache are reset after every test

Design Decisions:
    - raise_app_exceptions=False: the catch-all 500 handler is asserted on the
      response instead of the exception escaping into the test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from directory_api.api.dependencies import get_profile_store
from directory_api.config import get_settings
from directory_api.infrastructure.memory_store import InMemoryProfileStore
from directory_api.main import app


@pytest.fixture
async def client():
    app.state.db_manager = None
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    app.state.db_manager = None
    get_settings.cache_clear()


@pytest.fixture
def use_store():
    """Route every request to the given ProfileStore."""
    def _use(store):
        app.dependency_overrides[get_profile_store] = lambda: store
        return store
    return _use


@pytest.fixture
def memory_store(use_store, directory_records):
    return use_store(InMemoryProfileStore(directory_records))


@pytest.fixture
def development_mode(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "development")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
