"""Cache service for owner-scoped key-value state.

This service sits between actions (or HTTP handlers) and the CacheStore
repository. It resolves relative TTLs against the store clock, applies
the default TTL and exposes an async API for the runtime.
"""

import logging

from action_runtime.config import settings
from action_runtime.entities import CacheEntryEntity, JSONValue
from action_runtime.protocols import CacheStore

logger = logging.getLogger(__name__)


class CacheService:
    """Owner-scoped cache used by actions and the runtime.

    This service depends on the CacheStore PROTOCOL, not a concrete
    implementation, so the same actions run against the in-memory store
    in tests and Redis in production.

    Example:
        ```python
        from action_runtime.repositories import InMemoryCacheRepository
        from action_runtime.services import CacheService

        cache = CacheService.create(repository=InMemoryCacheRepository())
        await cache.put("agent-1", "session", {"step": 1}, ttl=300)
        entry = await cache.get("agent-1", "session")
        ```
    """

    def __init__(self, repository: CacheStore, default_ttl: int | None = None) -> None:
        """Initialize the cache service.

        Args:
            repository: Cache storage backend (required).
            default_ttl: TTL in seconds applied when a write names no expiry.
                0 means entries never expire. Defaults to settings.
        """
        self._repository = repository
        self._default_ttl = settings.cache_default_ttl if default_ttl is None else default_ttl

    @classmethod
    def create(cls, repository: CacheStore, default_ttl: int | None = None) -> "CacheService":
        """Factory method to create CacheService with sensible defaults.

        Args:
            repository: Cache storage backend (required).
            default_ttl: Default TTL in seconds. If None, uses settings.

        Returns:
            Configured CacheService instance
        """
        return cls(repository=repository, default_ttl=default_ttl)

    async def put(
        self,
        owner_id: str,
        key: str,
        value: JSONValue,
        expires_at: float | None = None,
        ttl: float | None = None,
    ) -> CacheEntryEntity:
        """Insert or replace the value stored under (key, owner_id).

        Args:
            owner_id: The owning scope
            key: Entry key
            value: JSON payload
            expires_at: Absolute expiry as a Unix timestamp
            ttl: Relative expiry in seconds, measured on the store clock

        Returns:
            The stored entry

        Raises:
            ValueError: If both expires_at and ttl are given
            StoreUnavailableError: If the store cannot be reached
        """
        if expires_at is not None and ttl is not None:
            raise ValueError("Pass either expires_at or ttl, not both")

        if expires_at is None:
            if ttl is None and self._default_ttl:
                ttl = self._default_ttl
            if ttl is not None:
                expires_at = self._repository.now() + ttl

        entry = self._repository.upsert(owner_id, key, value, expires_at=expires_at)
        logger.debug("Stored %s/%s (id=%s, expires_at=%s)", owner_id, key, entry.id, expires_at)
        return entry

    async def get(self, owner_id: str, key: str) -> CacheEntryEntity | None:
        """Get the live entry for (key, owner_id).

        Returns:
            The entry, or None on a miss or an expired entry
        """
        return self._repository.fetch(owner_id, key)

    async def get_value(self, owner_id: str, key: str, default: JSONValue = None) -> JSONValue:
        """Get only the payload, falling back to ``default`` on a miss."""
        entry = self._repository.fetch(owner_id, key)
        return default if entry is None else entry.value

    async def delete(self, owner_id: str, key: str) -> bool:
        """Delete the entry. Deleting a missing key is a no-op.

        Returns:
            True if a live entry was removed, False otherwise
        """
        return self._repository.remove(owner_id, key)

    async def clear_owner(self, owner_id: str) -> int:
        """Delete every entry of an owner.

        Returns:
            Number of entries deleted
        """
        count = self._repository.clear_owner(owner_id)
        logger.info("Cleared %d cache entries for owner %s", count, owner_id)
        return count

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        stats = self._repository.get_stats()
        stats["default_ttl"] = self._default_ttl
        return stats

    async def is_healthy(self) -> bool:
        return self._repository.health_check()

    @property
    def default_ttl(self) -> int:
        return self._default_ttl

    @property
    def repository(self) -> CacheStore:
        """Get the underlying repository (for testing)."""
        return self._repository
