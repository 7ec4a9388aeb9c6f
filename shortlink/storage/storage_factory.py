"""
Store factory - switch storage backend from Settings
====================================================

Centralizes selection of the storage backend so the rest of the app stays
ignorant of where data lives.

- Takes an explicit Settings object (falls back to `load_settings()`).
- Imports the Postgres backend **only if** it is selected, so psycopg is
  not touched by SQLite or in-memory deployments.

Backends
--------
- "sqlite" (default): SQLiteStore(settings.DB_PATH)
- "memory":           MemoryStore()
- "postgres":         PostgresStore(settings.DB_DSN)
"""

import logging
from typing import Optional

from ..config import Settings, load_settings
from .base import BaseStore
from .memory import MemoryStore
from .sqlite_store import SQLiteStore

log = logging.getLogger("shortlink.storage")


def get_store(settings: Optional[Settings] = None, backend: Optional[str] = None) -> BaseStore:
    """
    Return a store instance based on configuration.

    Parameters
    ----------
    settings : Settings, optional
        Configuration; read from the environment when omitted.
    backend : str, optional
        Overrides `settings.STORE_BACKEND`.

    Raises
    ------
    ValueError
        Unknown backend, or postgres without a DSN.
    """
    settings = settings or load_settings()
    be = (backend or settings.STORE_BACKEND).strip().lower()

    log.info("Selected storage backend: %r", be)

    if be == "sqlite":
        return SQLiteStore(settings.DB_PATH)

    if be == "memory":
        return MemoryStore()

    if be == "postgres":
        if not settings.DB_DSN:
            raise ValueError("DB_DSN is required for postgres backend (env SHORTLINK_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from .postgres_store import PostgresStore
        return PostgresStore(dsn=settings.DB_DSN)

    raise ValueError(f"Unknown storage backend: {be!r}")
