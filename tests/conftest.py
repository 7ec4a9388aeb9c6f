"""
Global pytest fixtures for the Shortlink test suite.

Responsibilities:
    - Provide isolated stores (in-memory and SQLite on a temp file)
    - Provide a LinkService wired to the in-memory store
    - Provide a fresh FastAPI TestClient via the app factory, backed by SQLite

Why an app factory?
    `create_app(settings, store)` builds a new app around an injected store,
    so each test gets clean state and no file is written outside tmp_path.
"""

import os

# `main` builds a module-level app on import; keep it off the default SQLite file.
os.environ.setdefault("SHORTLINK_STORE_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlink.config import Settings
from shortlink.service.link_service import LinkService
from shortlink.storage.memory import MemoryStore
from shortlink.storage.sqlite_store import SQLiteStore

BASE_URL = "http://short.test"


@pytest.fixture
def settings() -> Settings:
    return Settings(BASE_URL=BASE_URL, STORE_BACKEND="memory", LOG_LEVEL="DEBUG")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sqlite_store(tmp_path):
    """SQLite store on a throwaway database file."""
    store = SQLiteStore(str(tmp_path / "links.sqlite"))
    yield store
    store.close()


@pytest.fixture
def service(memory_store: MemoryStore) -> LinkService:
    """LinkService wired to the in-memory store."""
    return LinkService(store=memory_store, base_url=BASE_URL)


@pytest.fixture
def client(settings, sqlite_store) -> TestClient:
    """
    Fresh TestClient around a new app backed by a temp SQLite database.

    Redirects are not followed unless a test asks for it.
    """
    app = create_app(settings=settings, store=sqlite_store)
    return TestClient(app)
