"""Shared test fixtures.

JWT_SECRET has no default in settings, so a test value is injected before
anything imports config.settings.
"""

import os

os.environ.setdefault("JWT_SECRET", "unit-test-secret-do-not-use-in-production")

import pytest
from httpx import ASGITransport, AsyncClient

from src.bk_gateway.auth.principal import Principal
from src.bk_ledger.engine.engine import LedgerEngine
from src.bk_ledger.engine.locks import AccountLockManager
from src.main import app
from tests.fakes import InMemoryStore


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def ledger(store: InMemoryStore) -> LedgerEngine:
    return LedgerEngine(store=store, locks=AccountLockManager(timeout_seconds=2.0))


@pytest.fixture
def alice(store: InMemoryStore) -> Principal:
    return store.add_user("alice")


@pytest.fixture
def bob(store: InMemoryStore) -> Principal:
    return store.add_user("bob")
