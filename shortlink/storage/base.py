"""
Base store interface for Shortlink.

Purpose:
    Define a small, stable contract that every storage backend
    (SQLite, in-memory, Postgres) implements, so the LinkService never
    changes when the backend does.

Contract:
    - `insert` raises ConstraintError when the short code is taken.
    - Lookups return a Link or None.
    - `increment_visits` returns False when the code does not exist.
    - Any other failure raises StorageError.

Testing & Coverage:
    Abstract methods are annotated with `# pragma: no cover` since they are
    never executed directly.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import Link


class BaseStore(ABC):
    """Abstract base class for link stores."""

    @abstractmethod  # pragma: no cover
    def insert(self, original_url: str, short_code: str, created_at: int) -> Link:
        """
        Persist a new link with zero visits.

        Returns:
            Link: The stored row, including its assigned id.

        Raises:
            ConstraintError: If `short_code` already exists.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_by_code(self, short_code: str) -> Optional[Link]:
        """Return the link stored under `short_code`, or None."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_by_url(self, original_url: str) -> Optional[Link]:
        """Return a link pointing at `original_url`, or None."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def increment_visits(self, short_code: str) -> bool:
        """
        Add one visit to the link.

        Returns:
            bool: False if the code does not exist.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release the underlying connection, if any."""
