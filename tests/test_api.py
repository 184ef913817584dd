"""
Tests for the action runtime HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from action_runtime.api.app import app
from action_runtime.entities import ActionDefinition, ActionExample
from action_runtime.repositories import InMemoryCacheRepository
from action_runtime.services import ActionRegistry


async def _noop(runtime, message, state, options, callback=None, responses=None):
    return None


@pytest.fixture
def registry():
    """Create a registry with one documented action."""
    registry = ActionRegistry()
    registry.register(
        ActionDefinition(
            name="GET_VALIDATOR_INFO",
            handler=_noop,
            description="Retrieves information about a validator.",
            aliases=("QUERY_VALIDATOR", "VALIDATOR_DETAILS"),
            examples=[
                [
                    ActionExample(name="user", content={"text": "Who runs validator 7?"}),
                    ActionExample(name="agent", content={"text": "", "actions": ["GET_VALIDATOR_INFO"]}),
                ]
            ],
        )
    )
    return registry


@pytest.fixture
def client(registry):
    """Create a test client backed by an in-memory store."""
    app.state.repository = InMemoryCacheRepository()
    app.state.action_registry = registry
    with TestClient(app) as test_client:
        yield test_client


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Action Runtime API"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["registered_actions"] == 1


def test_list_actions(client):
    """Registered actions are listed with their metadata."""
    response = client.get("/actions")
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    action = data["actions"][0]
    assert action["name"] == "GET_VALIDATOR_INFO"
    assert action["aliases"] == ["QUERY_VALIDATOR", "VALIDATOR_DETAILS"]
    assert action["example_count"] == 1


def test_put_get_replace(client):
    """PUT twice keeps the id and returns the latest value."""
    first = client.put("/cache/u1/session", json={"value": {"step": 1}})
    assert first.status_code == 200

    second = client.put("/cache/u1/session", json={"value": {"step": 2}})
    assert second.json()["id"] == first.json()["id"]

    response = client.get("/cache/u1/session")
    assert response.status_code == 200
    assert response.json()["value"] == {"step": 2}


def test_missing_entry_is_404(client):
    """A cache miss maps to 404."""
    response = client.get("/cache/u1/nothing")
    assert response.status_code == 404


def test_ttl_and_expires_at_are_exclusive(client):
    """The request DTO rejects two expiry forms."""
    response = client.put(
        "/cache/u1/k",
        json={"value": 1, "ttl_seconds": 10, "expires_at": 1.0},
    )
    assert response.status_code == 422


def test_expired_write_is_404(client):
    """Writing with an expiry in the past leaves nothing to read."""
    client.put("/cache/u1/k", json={"value": 1, "expires_at": 1.0})
    assert client.get("/cache/u1/k").status_code == 404


def test_delete_and_clear(client):
    """Deletes are idempotent; clearing an owner reports the count."""
    client.put("/cache/u1/a", json={"value": 1})
    client.put("/cache/u1/b", json={"value": 2})

    assert client.delete("/cache/u1/a").json()["deleted_count"] == 1
    assert client.delete("/cache/u1/a").json()["deleted_count"] == 0

    response = client.delete("/cache/u1")
    assert response.status_code == 200
    assert response.json()["deleted_count"] == 1


def test_get_stats(client):
    """Stats report the backend."""
    client.put("/cache/u1/a", json={"value": 1})
    response = client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["backend"] == "memory"
    assert data["total_entries"] == 1


class _BrokenRepository(InMemoryCacheRepository):
    def remove(self, owner_id, key):
        raise RuntimeError("disk on fire")

    def clear_owner(self, owner_id):
        raise RuntimeError("disk on fire")


@pytest.fixture
def broken_client(registry):
    """Create a test client whose store fails on deletes."""
    app.state.repository = _BrokenRepository()
    app.state.action_registry = registry
    with TestClient(app) as test_client:
        yield test_client


def test_delete_errors_are_500(broken_client):
    """Unexpected store errors on delete and clear map to 500, not an unhandled crash."""
    response = broken_client.delete("/cache/u1/a")
    assert response.status_code == 500
    assert "disk on fire" in response.json()["detail"]

    response = broken_client.delete("/cache/u1")
    assert response.status_code == 500
    assert "disk on fire" in response.json()["detail"]
