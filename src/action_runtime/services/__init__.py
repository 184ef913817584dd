"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

    ActionRuntime -> ActionDispatcher -> ActionRegistry -> Action
                  -> CacheService -> CacheStore

Usage:
    ```python
    from action_runtime.services import ActionRuntime, CacheService

    cache = CacheService.create(repository=RedisCacheRepository.create())
    runtime = ActionRuntime(owner_id="agent-1", cache=cache)
    ```
"""

from .action_registry import ActionRegistry, default_matcher, normalize_action_name
from .cache_service import CacheService
from .dispatcher import ActionDispatcher, ResponseChannel
from .runtime import ActionRuntime

__all__ = [
    "ActionDispatcher",
    "ActionRegistry",
    "ActionRuntime",
    "CacheService",
    "ResponseChannel",
    "default_matcher",
    "normalize_action_name",
]
