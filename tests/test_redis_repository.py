"""
Tests for the Redis cache store, run against fakeredis.
"""

import json

import fakeredis
import pytest
import redis

from action_runtime.errors import StoreUnavailableError
from action_runtime.protocols import CacheStore
from action_runtime.repositories import RedisCacheRepository


def _write_raw(client, entry_key, entry_id="e1", owner_id="u1", key="k", expires_at=None):
    mapping = {
        "id": entry_id,
        "owner_id": owner_id,
        "key": key,
        "value": json.dumps({"v": 1}),
        "created_at": "1.0",
    }
    if expires_at is not None:
        mapping["expires_at"] = expires_at
    client.hset(entry_key, mapping=mapping)


@pytest.fixture
def redis_client():
    """Create an isolated fake Redis server."""
    return fakeredis.FakeRedis()


@pytest.fixture
def redis_repository(redis_client):
    """Create a repository under a test prefix."""
    return RedisCacheRepository(redis_client=redis_client, key_prefix="test_cache")


def test_satisfies_protocol(redis_repository):
    """The Redis repository is a CacheStore."""
    assert isinstance(redis_repository, CacheStore)


def test_put_then_get(redis_repository):
    """Nested payloads survive the JSON round trip."""
    redis_repository.upsert("u1", "session", {"step": 1, "path": ["a", "b"], "ok": True})
    entry = redis_repository.fetch("u1", "session")
    assert entry.value == {"step": 1, "path": ["a", "b"], "ok": True}
    assert entry.key == "session"
    assert entry.owner_id == "u1"


def test_second_put_replaces(redis_repository):
    """One hash per (owner, key); the id survives a replace."""
    first = redis_repository.upsert("u1", "session", {"step": 1})
    second = redis_repository.upsert("u1", "session", {"step": 2})

    assert second.id == first.id
    assert second.created_at == first.created_at
    assert redis_repository.fetch("u1", "session").value == {"step": 2}
    assert redis_repository.count_all() == 1


def test_replace_drops_previous_expiry(redis_repository, redis_client):
    """A replace without expiry makes the entry permanent again."""
    now = redis_repository.now()
    redis_repository.upsert("u1", "k", 1, expires_at=now + 60)
    redis_repository.upsert("u1", "k", 2)

    entry = redis_repository.fetch("u1", "k")
    assert entry.expires_at is None
    assert redis_client.ttl("test_cache:2:u1:k") == -1


def test_expired_entry_is_not_returned(redis_repository):
    """Writing with a past expiry never yields a readable entry."""
    redis_repository.upsert("u1", "session", {"step": 1}, expires_at=redis_repository.now() - 1)
    assert redis_repository.fetch("u1", "session") is None


def test_future_expiry_sets_native_ttl(redis_repository, redis_client):
    """Redis is told to reclaim the key on its own."""
    redis_repository.upsert("u1", "token", "abc", expires_at=redis_repository.now() + 30)
    assert 0 < redis_client.pttl("test_cache:2:u1:token") <= 30_000
    assert redis_repository.fetch("u1", "token").value == "abc"


def test_colon_bearing_owners_do_not_collide(redis_repository):
    """("x", "a:b") and ("x:a", "b") are distinct entries."""
    first = redis_repository.upsert("x", "a:b", {"secret": "owner-x"})
    assert redis_repository.fetch("x:a", "b") is None

    second = redis_repository.upsert("x:a", "b", {"other": 1})
    assert second.id != first.id
    assert redis_repository.fetch("x", "a:b").value == {"secret": "owner-x"}
    assert redis_repository.fetch("x:a", "b").value == {"other": 1}
    assert redis_repository.count_all() == 2

    assert redis_repository.clear_owner("x") == 1
    assert redis_repository.fetch("x:a", "b").value == {"other": 1}


def test_foreign_hash_reads_as_miss(redis_repository, redis_client):
    """A hash whose fields name another entry is never served or deleted."""
    _write_raw(redis_client, "test_cache:2:u1:k", owner_id="u2", key="k")
    assert redis_repository.fetch("u1", "k") is None
    assert redis_repository.remove("u1", "k") is False
    assert redis_client.exists("test_cache:2:u1:k") == 1


def test_expired_hash_is_evicted_on_read(redis_repository, redis_client):
    """An entry past expires_at is a miss and gets deleted."""
    _write_raw(redis_client, "test_cache:2:u1:k", expires_at="2.0")
    assert redis_repository.fetch("u1", "k") is None
    assert redis_client.exists("test_cache:2:u1:k") == 0


def test_eviction_spares_a_rewritten_entry(redis_repository, redis_client):
    """A stale eviction never deletes a value written after the expired read."""
    _write_raw(redis_client, "test_cache:2:u1:k", entry_id="old", expires_at="2.0")
    fresh = redis_repository.upsert("u1", "k", {"fresh": True})
    assert fresh.id != "old"

    redis_repository._evict_expired("test_cache:2:u1:k", "old")
    assert redis_repository.fetch("u1", "k").value == {"fresh": True}


def test_delete_is_idempotent(redis_repository):
    """Deleting missing keys succeeds."""
    redis_repository.upsert("u1", "k", 1)
    assert redis_repository.remove("u1", "k") is True
    assert redis_repository.remove("u1", "k") is False
    assert redis_repository.remove("u1", "missing") is False


def test_clear_owner(redis_repository):
    """Only the owner's keys go."""
    redis_repository.upsert("u1", "a", 1)
    redis_repository.upsert("u1", "b", 2)
    redis_repository.upsert("u2", "a", 3)

    assert redis_repository.clear_owner("u1") == 2
    assert redis_repository.fetch("u2", "a").value == 3
    assert redis_repository.get_stats()["total_entries"] == 1


def test_health_check(redis_repository):
    """A reachable server is healthy."""
    assert redis_repository.health_check() is True


def test_outage_raises_store_unavailable():
    """Connection errors surface as StoreUnavailableError, never as a silent drop."""
    unreachable = redis.Redis(host="127.0.0.1", port=1, socket_connect_timeout=0.2)
    repository = RedisCacheRepository(redis_client=unreachable, key_prefix="test_cache")

    with pytest.raises(StoreUnavailableError):
        repository.upsert("u1", "k", 1, expires_at=None)
    with pytest.raises(StoreUnavailableError):
        repository.fetch("u1", "k")
    assert repository.health_check() is False
