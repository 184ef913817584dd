"""HTTP handlers exposing registered action metadata (read-only)."""

from action_runtime.dto import ActionInfo, ActionListResponse, HealthCheckResponse
from action_runtime.services import ActionRegistry, CacheService


class ActionHandler:
    """Lists what is registered; dispatching stays in-process."""

    def __init__(self, registry: ActionRegistry, cache_service: CacheService) -> None:
        self._registry = registry
        self._cache = cache_service

    async def list_actions(self) -> ActionListResponse:
        """Handle GET /actions requests."""
        actions = [
            ActionInfo(
                name=action.name,
                aliases=list(action.aliases),
                description=action.description,
                example_count=len(action.examples),
            )
            for action in self._registry.list_actions()
        ]
        return ActionListResponse(count=len(actions), actions=actions)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = await self._cache.is_healthy()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
            registered_actions=len(self._registry),
        )
