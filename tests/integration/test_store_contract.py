"""
Integration tests for the BaseStore contract across backends.

Parameterized over available backends:
- always "memory" and "sqlite"
- "postgres" only if SHORTLINK_DB_DSN is set (codes are random per test, so reruns do not collide)
"""

import os
import uuid

import pytest

from shortlink.config import Settings
from shortlink.errors import ConstraintError
from shortlink.storage.storage_factory import get_store


def available_backends():
    backends = ["memory", "sqlite"]
    if os.getenv("SHORTLINK_DB_DSN"):
        backends.append(pytest.param("postgres", marks=pytest.mark.postgres))
    return backends


@pytest.fixture(params=available_backends())
def store(request, tmp_path):
    settings = Settings(
        STORE_BACKEND=request.param,
        DB_PATH=str(tmp_path / "contract.sqlite"),
        DB_DSN=os.getenv("SHORTLINK_DB_DSN", ""),
    )
    s = get_store(settings)
    yield s
    s.close()


@pytest.fixture
def code():
    # Unique per test so a shared Postgres database does not collide across runs
    return uuid.uuid4().hex[:12]


def test_insert_and_lookup(store, code):
    url = f"https://example.com/{code}"
    link = store.insert(url, code, 1700000000000)
    assert link.short_code == code
    assert store.find_by_code(code).original_url == url
    assert store.find_by_url(url).short_code == code


def test_collision_on_insert(store, code):
    store.insert("https://one.com", code, 1)
    with pytest.raises(ConstraintError):
        store.insert("https://two.com", code, 2)


def test_visits_only_grow(store, code):
    store.insert("https://example.com/v", code, 1)
    assert store.find_by_code(code).visits == 0
    for expected in range(1, 4):
        assert store.increment_visits(code) is True
        assert store.find_by_code(code).visits == expected


def test_missing_code(store, code):
    assert store.find_by_code(code) is None
    assert store.increment_visits(code) is False
