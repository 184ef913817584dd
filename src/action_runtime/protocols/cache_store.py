"""Cache storage protocol.

Defines the interface for any backend that keeps owner-scoped, optionally
expiring key-value entries.

Implementations can include:
- In-process dictionary (default, single process)
- Redis (shared across processes)
- PostgreSQL with a unique (key, owner_id) constraint
- Any other keyed store with atomic upsert
"""

from typing import Protocol, runtime_checkable

from action_runtime.entities import CacheEntryEntity, JSONValue


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Implementations own entry identity and
    the (key, owner_id) uniqueness invariant, and evaluate expiry against
    their own clock.

    Example:
        ```python
        from action_runtime.protocols import CacheStore

        repo: CacheStore = InMemoryCacheRepository()
        repo: CacheStore = RedisCacheRepository.create()
        ```
    """

    def now(self) -> float:
        """Return the store's current time.

        Returns:
            Unix timestamp in seconds as seen by the storage medium
        """
        ...

    def upsert(
        self,
        owner_id: str,
        key: str,
        value: JSONValue,
        expires_at: float | None = None,
    ) -> CacheEntryEntity:
        """Insert or replace the entry for (key, owner_id).

        Args:
            owner_id: The owning scope
            key: Entry key, unique per owner
            value: JSON payload
            expires_at: Absolute expiry (Unix timestamp), None for never

        Returns:
            The stored entry; id and created_at are kept on replace

        Raises:
            StoreUnavailableError: If the medium cannot be reached
        """
        ...

    def fetch(self, owner_id: str, key: str) -> CacheEntryEntity | None:
        """Fetch a live entry.

        Args:
            owner_id: The owning scope
            key: Entry key

        Returns:
            The entry, or None if missing or expired
        """
        ...

    def remove(self, owner_id: str, key: str) -> bool:
        """Delete an entry. Missing keys are not an error.

        Args:
            owner_id: The owning scope
            key: Entry key

        Returns:
            True if a live entry was deleted, False otherwise
        """
        ...

    def clear_owner(self, owner_id: str) -> int:
        """Delete every entry of an owner.

        Returns:
            Number of entries deleted
        """
        ...

    def count_all(self) -> int:
        """Count stored entries, live or not yet evicted.

        Returns:
            Total number of entries
        """
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...

    def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...
