"""
SQLiteStore - embedded SQLite storage for Shortlink
===================================================

The default backend. One database file holds the `links` table; the
connection is opened once when the store is built and reused for every
request, then closed by the app on shutdown.

Key Design Points
-----------------
- **Uniqueness**: `UNIQUE(short_code)` is the source of truth. A duplicate
  insert surfaces as `sqlite3.IntegrityError`, translated to ConstraintError.
- **Autocommit**: `isolation_level=None`, so every statement is its own
  implicit transaction. No transaction spans statements.
- **Threads**: FastAPI runs sync routes in a threadpool, so the connection is
  opened with `check_same_thread=False` and each statement runs under a lock.
- **Queries**: parameterized, with named placeholders.

Example
-------
>>> store = SQLiteStore(":memory:")
>>> store.insert("https://example.com", "AbC123", 1700000000000).short_code
'AbC123'
>>> store.find_by_code("AbC123").original_url
'https://example.com'
"""

import logging
import sqlite3
import threading
from typing import Optional

from ..errors import ConstraintError, StorageError
from ..models import Link
from .base import BaseStore

log = logging.getLogger("shortlink.storage")

SCHEMA = """
CREATE TABLE IF NOT EXISTS links (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  original_url TEXT NOT NULL,
  short_code TEXT NOT NULL UNIQUE,
  created_at INTEGER NOT NULL,
  visits INTEGER DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_short_code ON links(short_code);
"""

_COLUMNS = "id, original_url, short_code, created_at, visits"


class SQLiteStore(BaseStore):
    """SQLite implementation of the link store contract.

    Parameters
    ----------
    path : str
        Database file, created if missing. ":memory:" gives a private
        in-memory database (handy in tests).
    """

    def __init__(self, path: str = "mydb.sqlite") -> None:
        self.path = path
        self._lock = threading.Lock()
        try:
            self._con = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
            self._con.row_factory = sqlite3.Row
            self._con.executescript(SCHEMA)
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open SQLite database {path!r}: {exc}") from exc
        log.debug("Opened SQLite database %s", path)

    # ---- Internal helpers -------------------------------------------------

    def _execute(self, sql: str, params: dict, fetch: bool = False):
        """Run one statement under the lock; returns the first row when `fetch`, else the cursor."""
        with self._lock:
            try:
                cur = self._con.execute(sql, params)
                return cur.fetchone() if fetch else cur
            except sqlite3.IntegrityError as exc:
                raise ConstraintError(str(exc)) from exc
            except sqlite3.Error as exc:
                raise StorageError(str(exc)) from exc

    def _fetch_one(self, sql: str, params: dict) -> Optional[Link]:
        row = self._execute(sql, params, fetch=True)
        return Link.from_row(dict(row)) if row else None

    # ---- Contract methods -------------------------------------------------

    def insert(self, original_url: str, short_code: str, created_at: int) -> Link:
        cur = self._execute(
            """
            INSERT INTO links (original_url, short_code, created_at, visits)
            VALUES (:original_url, :short_code, :created_at, 0)
            """,
            {"original_url": original_url, "short_code": short_code, "created_at": created_at},
        )
        return Link(
            id=cur.lastrowid,
            original_url=original_url,
            short_code=short_code,
            created_at=created_at,
            visits=0,
        )

    def find_by_code(self, short_code: str) -> Optional[Link]:
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM links WHERE short_code = :short_code",
            {"short_code": short_code},
        )

    def find_by_url(self, original_url: str) -> Optional[Link]:
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM links WHERE original_url = :original_url LIMIT 1",
            {"original_url": original_url},
        )

    def increment_visits(self, short_code: str) -> bool:
        cur = self._execute(
            "UPDATE links SET visits = visits + 1 WHERE short_code = :short_code",
            {"short_code": short_code},
        )
        return cur.rowcount == 1

    def close(self) -> None:
        with self._lock:
            self._con.close()
        log.debug("Closed SQLite database %s", self.path)
