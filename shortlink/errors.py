"""
Storage error taxonomy for Shortlink.

Backends translate driver exceptions (sqlite3, psycopg) into these so the
LinkService never depends on a specific database library.
"""


class StorageError(Exception):
    """Any persistence failure not covered by a more specific error."""


class ConstraintError(StorageError):
    """A uniqueness constraint was violated (the short code is already taken)."""
