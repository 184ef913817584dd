"""Action Runtime - pluggable action dispatch with an owner-scoped cache.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (Action, RuntimeContext, CacheStore)
    - repositories: CacheStore implementations (in-memory, Redis)
    - services: Business logic (CacheService, ActionRegistry, ActionDispatcher, ActionRuntime)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from action_runtime import ActionDefinition, ActionRuntime, CacheService, InMemoryCacheRepository, Message

    runtime = ActionRuntime(
        owner_id="agent-1",
        cache=CacheService.create(repository=InMemoryCacheRepository.create()),
    )
    runtime.register_action(ActionDefinition(name="GET_INFO", handler=get_info))
    result = await runtime.process_actions(Message(owner_id="agent-1", actions=["GET_INFO"]))
    ```

For HTTP API:
    ```python
    from action_runtime.api.app import app
    ```
"""

from action_runtime.config import get_redis_client, settings
from action_runtime.entities import (
    ActionDefinition,
    ActionExample,
    ActionFailure,
    ActionResponse,
    CacheEntryEntity,
    DispatchResult,
    DispatchStatus,
    FailureStage,
    Message,
)
from action_runtime.errors import (
    ActionRuntimeError,
    DuplicateActionError,
    HandlerFailure,
    InvalidCacheKeyError,
    StoreUnavailableError,
    ValidationFailure,
)
from action_runtime.protocols import Action, CacheStore, RuntimeContext
from action_runtime.repositories import InMemoryCacheRepository, RedisCacheRepository
from action_runtime.services import (
    ActionDispatcher,
    ActionRegistry,
    ActionRuntime,
    CacheService,
    ResponseChannel,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "Action",
    "CacheStore",
    "RuntimeContext",
    # Services (business logic)
    "ActionDispatcher",
    "ActionRegistry",
    "ActionRuntime",
    "CacheService",
    "ResponseChannel",
    # Repositories (data access)
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    # Entities (domain models)
    "ActionDefinition",
    "ActionExample",
    "ActionFailure",
    "ActionResponse",
    "CacheEntryEntity",
    "DispatchResult",
    "DispatchStatus",
    "FailureStage",
    "Message",
    # Errors
    "ActionRuntimeError",
    "DuplicateActionError",
    "HandlerFailure",
    "InvalidCacheKeyError",
    "StoreUnavailableError",
    "ValidationFailure",
]
