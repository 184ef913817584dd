"""Repository layer for data access.

This layer hides the storage medium behind the CacheStore protocol.
The repositories are protocol-based (structural typing), not
inheritance-based. Any class implementing the required methods will
satisfy the protocol.
"""

from action_runtime.protocols import CacheStore

from .memory_repository import InMemoryCacheRepository
from .redis_repository import RedisCacheRepository

__all__ = [
    "CacheStore",
    "InMemoryCacheRepository",
    "RedisCacheRepository",
]
