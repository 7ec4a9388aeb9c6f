"""
In-memory store for Shortlink.

Responsibilities:
    - Keep links keyed by short code
    - Track visit counts
    - Provide lookups by code and by long URL
    - Enforce short-code uniqueness the way the SQL backends do

Design:
    - Reference implementation of the BaseStore contract.
    - Intentionally simple to keep unit/integration tests fast and deterministic.
    - For production use SQLiteStore or PostgresStore.
"""

import itertools
import threading
from typing import Dict, Optional

from ..errors import ConstraintError
from ..models import Link
from .base import BaseStore


class MemoryStore(BaseStore):
    def __init__(self):
        """
        Initialize empty storage.

        Internal schema:
            self.links = {short_code: Link}
        """
        self.links: Dict[str, Link] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, original_url: str, short_code: str, created_at: int) -> Link:
        """
        Store a new link.

        Rules:
            - A code that already exists is rejected regardless of URL
              (same as `UNIQUE(short_code)` in SQL).
            - The same URL may be stored under several codes; dedupe is the
              service's job.
        """
        with self._lock:
            if short_code in self.links:
                raise ConstraintError(f"short code {short_code!r} already exists")
            link = Link(
                id=next(self._ids),
                original_url=original_url,
                short_code=short_code,
                created_at=created_at,
                visits=0,
            )
            self.links[short_code] = link
        # Hand out copies so callers cannot mutate stored state
        return Link(**link.to_dict())

    def find_by_code(self, short_code: str) -> Optional[Link]:
        link = self.links.get(short_code)
        return Link(**link.to_dict()) if link else None

    def find_by_url(self, original_url: str) -> Optional[Link]:
        """
        Return the earliest link for the given URL.

        Scans all rows; fine for tests, the SQL backends use a query.
        """
        for link in self.links.values():
            if link.original_url == original_url:
                return Link(**link.to_dict())
        return None

    def increment_visits(self, short_code: str) -> bool:
        with self._lock:
            link = self.links.get(short_code)
            if link is None:
                return False
            link.visits += 1
            return True
