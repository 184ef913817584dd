"""Redis implementation of CacheStore.

Each entry is one hash at ``{prefix}:{len(owner_id)}:{owner_id}:{key}``;
the length prefix keeps owners containing ":" from colliding. Writes use an
optimistic WATCH/MULTI/EXEC transaction, which gives atomic conditional
upsert semantics even when several processes share the same Redis.
"""

import json
import logging
from collections.abc import Callable, Iterator
from functools import wraps
from typing import Any, TypeVar
from uuid import uuid4

import redis
from redis.client import Pipeline

from action_runtime.config import get_redis_client, settings
from action_runtime.entities import CacheEntryEntity, JSONValue
from action_runtime.errors import StoreUnavailableError

from ._validation import check_scope, dump_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

_GLOB_CHARS = str.maketrans({c: f"\\{c}" for c in "*?[]\\"})


def _translate_outage(method: Callable[..., T]) -> Callable[..., T]:
    """Turn connection-level Redis errors into StoreUnavailableError."""

    @wraps(method)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return method(*args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            logger.error("Redis unavailable during %s: %s", method.__name__, e)
            raise StoreUnavailableError(f"Redis unavailable: {e}") from e

    return wrapper


def _text(raw: bytes | str | None) -> str | None:
    if raw is None:
        return None
    return raw.decode() if isinstance(raw, bytes) else raw


class RedisCacheRepository:
    """Redis implementation using one hash per (owner, key).

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Uses:
    - Server TIME as the store clock for created_at and expiry checks
    - PEXPIREAT so Redis reclaims expired entries on its own
    - Float comparison on read so an entry is never served past expires_at
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key_prefix: Namespace for entry keys. If None, uses settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix

    @classmethod
    def create(cls, key_prefix: str | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            key_prefix: Redis key namespace. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(key_prefix=key_prefix)

    def _entry_key(self, owner_id: str, key: str) -> str:
        # Length-prefixed owner: ("x", "a:b") and ("x:a", "b") never share a key
        return f"{self._prefix}:{len(owner_id)}:{owner_id}:{key}"

    @staticmethod
    def _server_time(conn: redis.Redis | Pipeline) -> float:
        seconds, micros = conn.time()
        return seconds + micros / 1_000_000

    @_translate_outage
    def now(self) -> float:
        return self._server_time(self._client)

    @_translate_outage
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
            The stored entry
        """
        check_scope(owner_id, key)
        value_str = dump_value(value)
        entry_key = self._entry_key(owner_id, key)

        def write(pipe: Pipeline) -> CacheEntryEntity:
            # Immediate mode: these run while entry_key is WATCHed
            now = self._server_time(pipe)
            existing = self._parse(pipe.hgetall(entry_key), owner_id, key)

            if existing is not None and existing.is_live(now):
                entry_id, created_at = existing.id, existing.created_at
            else:
                entry_id, created_at = str(uuid4()), now

            mapping = {
                "id": entry_id,
                "owner_id": owner_id,
                "key": key,
                "value": value_str,
                "created_at": repr(created_at),
            }
            if expires_at is not None:
                mapping["expires_at"] = repr(float(expires_at))

            pipe.multi()
            pipe.delete(entry_key)
            pipe.hset(entry_key, mapping=mapping)
            if expires_at is not None:
                pipe.pexpireat(entry_key, int(expires_at * 1000))

            return CacheEntryEntity(
                id=entry_id,
                owner_id=owner_id,
                key=key,
                value=json.loads(value_str),
                created_at=created_at,
                expires_at=float(expires_at) if expires_at is not None else None,
            )

        return self._client.transaction(write, entry_key, value_from_callable=True)

    @_translate_outage
    def fetch(self, owner_id: str, key: str) -> CacheEntryEntity | None:
        """Fetch a live entry, deleting it if it has expired."""
        check_scope(owner_id, key)
        entry_key = self._entry_key(owner_id, key)

        pipe = self._client.pipeline(transaction=False)
        pipe.time()
        pipe.hgetall(entry_key)
        (seconds, micros), raw = pipe.execute()

        entry = self._parse(raw, owner_id, key)
        if entry is None:
            return None
        if not entry.is_live(seconds + micros / 1_000_000):
            self._evict_expired(entry_key, entry.id)
            return None
        return entry

    def _evict_expired(self, entry_key: str, entry_id: str) -> None:
        """Delete an expired entry unless it was rewritten since it was read."""

        def evict(pipe: Pipeline) -> bool:
            current = self._parse(pipe.hgetall(entry_key))
            if current is None or current.id != entry_id:
                return False
            if current.is_live(self._server_time(pipe)):
                return False
            pipe.multi()
            pipe.delete(entry_key)
            return True

        if self._client.transaction(evict, entry_key, value_from_callable=True):
            logger.debug("Evicted expired entry %s", entry_key)

    @_translate_outage
    def remove(self, owner_id: str, key: str) -> bool:
        check_scope(owner_id, key)
        entry_key = self._entry_key(owner_id, key)

        def delete(pipe: Pipeline) -> bool:
            entry = self._parse(pipe.hgetall(entry_key), owner_id, key)
            if entry is None:
                return False
            live = entry.is_live(self._server_time(pipe))
            pipe.multi()
            pipe.delete(entry_key)
            return live

        return self._client.transaction(delete, entry_key, value_from_callable=True)

    @_translate_outage
    def clear_owner(self, owner_id: str) -> int:
        """Delete every entry belonging to owner_id."""
        count = 0
        for entry_key in self._owner_keys(owner_id):
            if _text(self._client.hget(entry_key, "owner_id")) != owner_id:
                continue
            if self._client.delete(entry_key):
                count += 1
        return count

    @_translate_outage
    def count_all(self) -> int:
        count = 0
        for _ in self._client.scan_iter(match=f"{self._prefix.translate(_GLOB_CHARS)}:*"):
            count += 1
        return count

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.exceptions.RedisError as e:
            logger.warning("Redis health check failed: %s", e)
            return False

    def get_stats(self) -> dict:
        """Get repository statistics.

        Returns:
            Dictionary with stats
        """
        return {
            "backend": "redis",
            "key_prefix": self._prefix,
            "total_entries": self.count_all(),
        }

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client

    def _owner_keys(self, owner_id: str) -> Iterator[bytes]:
        prefix = self._prefix.translate(_GLOB_CHARS)
        pattern = f"{prefix}:{len(owner_id)}:{owner_id.translate(_GLOB_CHARS)}:*"
        # Materialize before deleting so the cursor is not disturbed
        yield from list(self._client.scan_iter(match=pattern))

    @staticmethod
    def _parse(
        raw: dict, owner_id: str | None = None, key: str | None = None
    ) -> CacheEntryEntity | None:
        """Build an entry from a hash; a hash of another (owner, key) reads as a miss."""
        if not raw:
            return None
        fields = {_text(k): _text(v) for k, v in raw.items()}
        if owner_id is not None and (fields.get("owner_id"), fields.get("key")) != (owner_id, key):
            logger.warning(
                "Hash of %s/%s read for %s/%s", fields.get("owner_id"), fields.get("key"), owner_id, key
            )
            return None
        expires_at = fields.get("expires_at")
        return CacheEntryEntity(
            id=fields["id"],
            owner_id=fields["owner_id"],
            key=fields["key"],
            value=json.loads(fields["value"]),
            created_at=float(fields["created_at"]),
            expires_at=float(expires_at) if expires_at else None,
        )
