"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from action_runtime.config import settings
from action_runtime.handlers import ActionHandler, CacheHandler
from action_runtime.logging_config import configure_logging
from action_runtime.protocols import CacheStore
from action_runtime.repositories import InMemoryCacheRepository, RedisCacheRepository
from action_runtime.services import ActionRegistry, CacheService

logger = logging.getLogger(__name__)


def build_repository() -> CacheStore:
    """Create the configured CacheStore backend."""
    if settings.is_redis_backend:
        return RedisCacheRepository.create()
    return InMemoryCacheRepository.create()


def get_cache_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def get_action_handler(request: Request) -> ActionHandler:
    """Dependency injection for ActionHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "action_handler", None)
    if handler is None:
        raise RuntimeError("ActionHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repository (data access) - from CACHE_BACKEND
    2. Service (business logic) - app.state.cache_service
    3. Registry - app.state.action_registry, filled by the embedding application
    4. Handlers (HTTP endpoints) - app.state.cache_handler / action_handler

    A repository or registry already placed on app.state is reused.
    """
    configure_logging()

    repository = getattr(app.state, "repository", None) or build_repository()
    registry = getattr(app.state, "action_registry", None) or ActionRegistry()

    cache_service = CacheService.create(repository=repository)

    app.state.repository = repository
    app.state.action_registry = registry
    app.state.cache_service = cache_service
    app.state.cache_handler = CacheHandler(cache_service=cache_service)
    app.state.action_handler = ActionHandler(registry=registry, cache_service=cache_service)

    logger.info("Cache backend: %s", settings.cache_backend)
    logger.info("Cache healthy: %s", await cache_service.is_healthy())

    yield

    # Cleanup - remove from app.state
    del app.state.action_handler
    del app.state.cache_handler
    del app.state.cache_service
    del app.state.action_registry
    del app.state.repository
    logger.info("Action runtime API shut down")


# Type aliases for cleaner dependency injection
CacheHandlerDep = Annotated[CacheHandler, Depends(get_cache_handler)]
ActionHandlerDep = Annotated[ActionHandler, Depends(get_action_handler)]
