"""
Tests for action registration, resolution and validation.
"""

import asyncio

import pytest

from action_runtime.entities import ActionDefinition, FailureStage, Message
from action_runtime.errors import DuplicateActionError
from action_runtime.services import ActionRegistry, normalize_action_name


async def noop_handler(runtime, message, state, options, callback=None, responses=None):
    return None


def make_action(name, aliases=(), validate=None):
    if validate is None:
        return ActionDefinition(name=name, handler=noop_handler, aliases=tuple(aliases))
    return ActionDefinition(name=name, handler=noop_handler, aliases=tuple(aliases), validate=validate)


def test_duplicate_name_is_rejected(registry):
    """Aliases may overlap, names may not."""
    registry.register(make_action("GET_INFO", aliases=["INFO"]))
    registry.register(make_action("GET_MORE_INFO", aliases=["INFO"]))

    with pytest.raises(DuplicateActionError) as exc_info:
        registry.register(make_action("GET_INFO"))
    assert exc_info.value.name == "GET_INFO"
    assert len(registry) == 2


def test_alias_collision_resolves_in_registration_order(registry):
    """Both actions sharing an alias are candidates, first registered first."""
    registry.register(make_action("GET_INFO", aliases=["INFO"]))
    registry.register(make_action("SEND", aliases=["TRANSFER"]))
    registry.register(make_action("GET_MORE_INFO", aliases=["INFO"]))

    candidates = registry.resolve_candidates(Message(owner_id="u1", actions=["INFO"]))
    assert [a.name for a in candidates] == ["GET_INFO", "GET_MORE_INFO"]


def test_resolution_is_normalized_and_deduplicated(registry):
    """Case and underscores do not matter; an action appears once."""
    registry.register(make_action("GET_VALIDATOR_INFO", aliases=["QUERY_VALIDATOR"]))

    message = Message(owner_id="u1", actions=["get_validator_info", "QueryValidator"])
    candidates = registry.resolve_candidates(message)
    assert [a.name for a in candidates] == ["GET_VALIDATOR_INFO"]


def test_no_signal_no_candidates(registry):
    """A message without intent selects nothing."""
    registry.register(make_action("GET_INFO"))
    assert registry.resolve_candidates(Message(owner_id="u1")) == []


def test_custom_matcher():
    """A configured matcher replaces name matching."""
    registry = ActionRegistry(matcher=lambda signal, action: action.name.startswith(signal))
    registry.register(make_action("WALLET_SEND"))
    registry.register(make_action("WALLET_BALANCE"))
    registry.register(make_action("SWAP"))

    candidates = registry.resolve_candidates(Message(owner_id="u1", actions=["WALLET"]))
    assert [a.name for a in candidates] == ["WALLET_SEND", "WALLET_BALANCE"]


def test_unregister(registry):
    """Unregistering frees the name."""
    registry.register(make_action("GET_INFO"))
    assert registry.unregister("GET_INFO") is True
    assert registry.unregister("GET_INFO") is False
    registry.register(make_action("GET_INFO"))
    assert "GET_INFO" in registry


def test_normalize_action_name():
    assert normalize_action_name("GET_INFO") == normalize_action_name("getinfo")


async def test_validate_all_keeps_order_and_records_failures(registry, runtime):
    """Validators finishing out of order still yield registration order; errors count as False."""

    async def slow_true(runtime, message, state):
        await asyncio.sleep(0.02)
        return True

    async def fast_true(runtime, message, state):
        return True

    async def false(runtime, message, state):
        return False

    async def broken(runtime, message, state):
        raise RuntimeError("settings backend exploded")

    actions = [
        make_action("A", validate=slow_true),
        make_action("B", validate=broken),
        make_action("C", validate=false),
        make_action("D", validate=fast_true),
    ]
    message = Message(owner_id="u1", actions=["A", "B", "C", "D"])

    validated, failures = await registry.validate_all(actions, runtime, message, {})

    assert [a.name for a in validated] == ["A", "D"]
    assert len(failures) == 1
    assert failures[0].action_name == "B"
    assert failures[0].stage is FailureStage.VALIDATION
    assert failures[0].error_type == "RuntimeError"


async def test_validation_concurrency_is_bounded(runtime):
    """No more validators run at once than the configured limit."""
    registry = ActionRegistry(max_concurrency=2)
    running = 0
    peak = 0

    async def tracked(runtime, message, state):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return True

    actions = [make_action(f"A{i}", validate=tracked) for i in range(6)]
    validated, _ = await registry.validate_all(actions, runtime, Message(owner_id="u1"), None)

    assert len(validated) == 6
    assert peak == 2


async def test_validator_reads_settings(registry, runtime):
    """Missing configuration makes validation fail."""

    async def needs_wallet(runtime, message, state):
        return runtime.get_setting("WALLET_PRIVATE_KEY") is not None

    async def needs_info(runtime, message, state):
        return runtime.get_setting("INFO_ENABLED") is not None

    actions = [make_action("SEND", validate=needs_wallet), make_action("INFO", validate=needs_info)]
    validated, failures = await registry.validate_all(actions, runtime, Message(owner_id="u1"), None)
    assert [a.name for a in validated] == ["INFO"]
    assert failures == []
