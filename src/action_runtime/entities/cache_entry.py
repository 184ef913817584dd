"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any, Union

JSONValue = Union[None, bool, int, float, str, list[Any], dict[str, Any]]


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a single owner-scoped cache record.

    This is an internal representation used by services and repositories.
    For API contracts, use the DTO classes from the dto package.

    Attributes:
        id: Store-assigned identifier, kept across replaces
        owner_id: The owning scope (agent, tenant, ...)
        key: Key, unique per owner
        value: The cached JSON payload
        created_at: When the entry was first written (Unix timestamp)
        expires_at: When the entry stops being live (Unix timestamp), None for never
    """

    id: str
    owner_id: str
    key: str
    value: JSONValue
    created_at: float
    expires_at: float | None = None

    def is_live(self, now: float) -> bool:
        """Check whether the entry is still visible at store time ``now``."""
        return self.expires_at is None or self.expires_at > now
