"""Action and runtime context protocols.

An action is anything exposing a name, aliases, a description, examples and
two coroutines: ``validate`` and ``handler``. Registries and dispatchers
only depend on this capability set.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from action_runtime.entities import ActionResponse, Message

if TYPE_CHECKING:
    from action_runtime.services.cache_service import CacheService

State = dict[str, Any]
HandlerCallback = Callable[[ActionResponse], Awaitable[None]]


@runtime_checkable
class RuntimeContext(Protocol):
    """What an action may read from the runtime it runs in."""

    @property
    def owner_id(self) -> str:
        """Scope used for cache reads and writes."""
        ...

    @property
    def cache(self) -> "CacheService":
        """Owner-scoped cache access."""
        ...

    def get_setting(self, name: str) -> str | None:
        """Look up a configuration value.

        Args:
            name: Setting name, e.g. "WALLET_PUBLIC_KEY"

        Returns:
            The value, or None if not configured
        """
        ...


@runtime_checkable
class Action(Protocol):
    """Protocol for pluggable actions.

    ``validate`` must not mutate shared state. ``handler`` may call
    ``callback`` any number of times before returning, and may return a
    response of its own.

    Example:
        ```python
        class GetInfo:
            name = "GET_INFO"
            aliases = ("INFO",)
            description = "Reply with runtime info"
            examples = []

            async def validate(self, runtime, message, state):
                return runtime.get_setting("INFO_ENABLED") is not None

            async def handler(self, runtime, message, state, options, callback=None, responses=None):
                response = ActionResponse(text="info", actions_taken=["GET_INFO"])
                if callback:
                    await callback(response)
                return response
        ```
    """

    name: str
    aliases: Sequence[str]
    description: str
    examples: Sequence[Any]

    def validate(
        self,
        runtime: RuntimeContext,
        message: Message,
        state: State | None,
    ) -> Awaitable[bool]: ...

    def handler(
        self,
        runtime: RuntimeContext,
        message: Message,
        state: State | None,
        options: dict[str, Any],
        callback: HandlerCallback | None = None,
        responses: list[ActionResponse] | None = None,
    ) -> Awaitable[ActionResponse | None]: ...
