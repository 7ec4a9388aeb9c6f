"""Data models for Shortlink."""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class Link:
    """One row of the `links` table."""

    id: int
    original_url: str
    short_code: str
    created_at: int  # epoch milliseconds
    visits: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Link":
        """Build a Link from a mapping keyed by column name."""
        return cls(
            id=int(row["id"]),
            original_url=row["original_url"],
            short_code=row["short_code"],
            created_at=int(row["created_at"]),
            visits=int(row["visits"] or 0),
        )
