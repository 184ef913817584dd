"""In-process implementation of CacheStore.

Keeps entries in a dictionary keyed by (owner_id, key). Writes and
lazy evictions run under one lock, so concurrent writers to the same
pair are serialized with last-writer-wins semantics.
"""

import copy
import json
import logging
import threading
import time
from collections.abc import Callable
from uuid import uuid4

from action_runtime.entities import CacheEntryEntity, JSONValue

from ._validation import check_scope, dump_value

logger = logging.getLogger(__name__)


class InMemoryCacheRepository:
    """Dictionary-backed store for a single process.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Values are copied on the way in and out so callers cannot mutate a
    stored entry behind the store's back.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        """Initialize the repository.

        Args:
            clock: Time source in Unix seconds. Defaults to time.time.
        """
        self._clock = clock or time.time
        self._entries: dict[tuple[str, str], CacheEntryEntity] = {}
        self._lock = threading.Lock()

    @classmethod
    def create(cls) -> "InMemoryCacheRepository":
        """Factory method to create an empty repository."""
        return cls()

    def now(self) -> float:
        return self._clock()

    def upsert(
        self,
        owner_id: str,
        key: str,
        value: JSONValue,
        expires_at: float | None = None,
    ) -> CacheEntryEntity:
        """Insert or replace the entry for (key, owner_id)."""
        check_scope(owner_id, key)
        # Round-trip through JSON so the stored payload is detached and plain
        stored_value = json.loads(dump_value(value))

        with self._lock:
            now = self.now()
            existing = self._entries.get((owner_id, key))
            if existing is not None and existing.is_live(now):
                entry = CacheEntryEntity(
                    id=existing.id,
                    owner_id=owner_id,
                    key=key,
                    value=stored_value,
                    created_at=existing.created_at,
                    expires_at=expires_at,
                )
            else:
                entry = CacheEntryEntity(
                    id=str(uuid4()),
                    owner_id=owner_id,
                    key=key,
                    value=stored_value,
                    created_at=now,
                    expires_at=expires_at,
                )
            self._entries[(owner_id, key)] = entry

        return self._detached(entry)

    def fetch(self, owner_id: str, key: str) -> CacheEntryEntity | None:
        """Fetch a live entry, evicting it if it has expired."""
        check_scope(owner_id, key)
        with self._lock:
            entry = self._entries.get((owner_id, key))
            if entry is None:
                return None
            if not entry.is_live(self.now()):
                del self._entries[(owner_id, key)]
                logger.debug("Evicted expired entry %s/%s", owner_id, key)
                return None
        return self._detached(entry)

    def remove(self, owner_id: str, key: str) -> bool:
        check_scope(owner_id, key)
        with self._lock:
            entry = self._entries.pop((owner_id, key), None)
            return entry is not None and entry.is_live(self.now())

    def clear_owner(self, owner_id: str) -> int:
        with self._lock:
            doomed = [pair for pair in self._entries if pair[0] == owner_id]
            for pair in doomed:
                del self._entries[pair]
        return len(doomed)

    def count_all(self) -> int:
        with self._lock:
            return len(self._entries)

    def health_check(self) -> bool:
        return True

    def get_stats(self) -> dict:
        with self._lock:
            owners = {owner for owner, _ in self._entries}
            return {
                "backend": "memory",
                "total_entries": len(self._entries),
                "owners": len(owners),
            }

    @staticmethod
    def _detached(entry: CacheEntryEntity) -> CacheEntryEntity:
        return CacheEntryEntity(
            id=entry.id,
            owner_id=entry.owner_id,
            key=entry.key,
            value=copy.deepcopy(entry.value),
            created_at=entry.created_at,
            expires_at=entry.expires_at,
        )
