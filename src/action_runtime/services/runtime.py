"""Concrete runtime context handed to actions."""

import logging
import os
from collections.abc import Mapping
from typing import Any

from action_runtime.entities import DispatchResult, Message
from action_runtime.protocols import Action, HandlerCallback, State

from .action_registry import ActionRegistry
from .cache_service import CacheService
from .dispatcher import ActionDispatcher

logger = logging.getLogger(__name__)


class ActionRuntime:
    """Runtime for one owner (agent, tenant): settings, cache and actions.

    Satisfies the RuntimeContext protocol, so it is what validators and
    handlers receive as ``runtime``.

    Settings are looked up in ``settings`` first, then ``secrets``, then
    the process environment.

    Example:
        ```python
        runtime = ActionRuntime(
            owner_id="agent-1",
            cache=CacheService.create(repository=InMemoryCacheRepository()),
            settings={"POLYGON_PLUGINS_ENABLED": "true"},
        )
        runtime.register_action(get_validator_info)
        result = await runtime.process_actions(Message(owner_id="agent-1", actions=["GET_VALIDATOR_INFO"]))
        ```
    """

    def __init__(
        self,
        owner_id: str,
        cache: CacheService,
        settings: Mapping[str, Any] | None = None,
        secrets: Mapping[str, Any] | None = None,
        registry: ActionRegistry | None = None,
        dispatcher: ActionDispatcher | None = None,
        use_environment: bool = True,
    ) -> None:
        if not owner_id:
            raise ValueError("owner_id is required")
        self._owner_id = owner_id
        self._cache = cache
        self._settings = dict(settings or {})
        self._secrets = dict(secrets or {})
        self._use_environment = use_environment
        self._registry = registry or ActionRegistry()
        self._dispatcher = dispatcher or ActionDispatcher(self._registry)

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def cache(self) -> CacheService:
        return self._cache

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    def get_setting(self, name: str) -> str | None:
        """Look up a configuration value.

        Args:
            name: Setting name

        Returns:
            The value as a string, or None if it is not configured
        """
        for source in (self._settings, self._secrets):
            value = source.get(name)
            if value is not None:
                return str(value)
        if self._use_environment:
            return os.environ.get(name)
        return None

    def register_action(self, action: Action) -> None:
        self._registry.register(action)

    async def process_actions(
        self,
        message: Message,
        state: State | None = None,
        options: dict[str, Any] | None = None,
        callback: HandlerCallback | None = None,
    ) -> DispatchResult:
        """Dispatch a message under this runtime."""
        if message.owner_id != self._owner_id:
            logger.warning(
                "Message %s owned by %s processed by runtime of %s",
                message.id,
                message.owner_id,
                self._owner_id,
            )
        return await self._dispatcher.dispatch(
            self, message, state=state, options=options, callback=callback
        )
