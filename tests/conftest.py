"""
Shared fixtures for the action runtime tests.
"""

import pytest

from action_runtime.repositories import InMemoryCacheRepository
from action_runtime.services import ActionRegistry, ActionRuntime, CacheService


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def repository(clock):
    """Create an in-memory repository driven by the fake clock."""
    return InMemoryCacheRepository(clock=clock)


@pytest.fixture
def cache_service(repository):
    """Create a cache service without a default TTL."""
    return CacheService.create(repository=repository, default_ttl=0)


@pytest.fixture
def registry():
    """Create an empty action registry."""
    return ActionRegistry(max_concurrency=4)


@pytest.fixture
def runtime(cache_service, registry):
    """Create a runtime for owner u1 with one configured setting."""
    return ActionRuntime(
        owner_id="u1",
        cache=cache_service,
        settings={"INFO_ENABLED": "true"},
        registry=registry,
        use_environment=False,
    )
