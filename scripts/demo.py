#!/usr/bin/env python3
"""
Demo script for the action runtime.

This script registers a few sample actions, dispatches messages to them and
shows the owner-scoped cache they share.
"""

import asyncio

from action_runtime import (
    ActionDefinition,
    ActionResponse,
    ActionRuntime,
    CacheService,
    InMemoryCacheRepository,
    Message,
)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def requires_wallet(runtime, message, state) -> bool:
    return runtime.get_setting("WALLET_PUBLIC_KEY") is not None


async def get_validator_info(runtime, message, state, options, callback=None, responses=None):
    info = await runtime.cache.get_value(runtime.owner_id, "validator:7")
    if info is None:
        info = {"name": "Validator 7", "commission_rate": 0.1, "total_staked": "1000000"}
        await runtime.cache.put(runtime.owner_id, "validator:7", info, ttl=60)

    content = ActionResponse(
        text=f"Validator info - Name: {info['name']}, Commission: {info['commission_rate'] * 100:.0f}%",
        actions_taken=["GET_VALIDATOR_INFO"],
        data={"validator_info": info},
    )
    if callback:
        await callback(content)
    return content


async def summarize(runtime, message, state, options, callback=None, responses=None):
    seen = [r.text for r in responses or []]
    return ActionResponse(text=f"Summarized {len(seen)} earlier response(s)")


async def demo_cache(runtime: ActionRuntime) -> None:
    """Demonstrate basic cache operations."""
    print_section("Owner-scoped Cache")

    cache = runtime.cache
    await cache.put("u1", "session", {"step": 1})
    await cache.put("u1", "session", {"step": 2})
    await cache.put("u2", "session", {"step": 9})

    print(f"\n  u1/session -> {await cache.get_value('u1', 'session')}")
    print(f"  u2/session -> {await cache.get_value('u2', 'session')}")

    await cache.put("u1", "otp", "1234", expires_at=cache.repository.now() - 1)
    print(f"  u1/otp (already expired) -> {await cache.get_value('u1', 'otp', default='<miss>')}")

    print(f"\n  Stats: {cache.get_stats()}")


async def demo_dispatch(runtime: ActionRuntime) -> None:
    """Demonstrate validation gating and sequential dispatch."""
    print_section("Action Dispatch")

    async def on_response(response: ActionResponse) -> None:
        print(f"  -> callback: {response.text} {response.actions_taken}")

    for actions in (["QUERY_VALIDATOR", "SUMMARIZE"], ["UNKNOWN_ACTION"]):
        message = Message(owner_id=runtime.owner_id, text="Who is validator 7?", actions=actions, source="demo")
        print(f"\n📨 Message asking for {actions}")
        result = await runtime.process_actions(message, callback=on_response)
        print(f"  Status: {result.status.value}")
        print(f"  Actions taken: {result.actions_taken}")
        for failure in result.failures:
            print(f"  ✗ {failure.action_name} ({failure.stage.value}): {failure.error}")


async def main() -> None:
    runtime = ActionRuntime(
        owner_id="agent-1",
        cache=CacheService.create(repository=InMemoryCacheRepository.create(), default_ttl=0),
        settings={"WALLET_PUBLIC_KEY": "0xabc"},
    )
    runtime.register_action(
        ActionDefinition(
            name="GET_VALIDATOR_INFO",
            aliases=("QUERY_VALIDATOR", "VALIDATOR_DETAILS"),
            description="Retrieves information about a specific validator.",
            validate=requires_wallet,
            handler=get_validator_info,
        )
    )
    runtime.register_action(
        ActionDefinition(name="SUMMARIZE", description="Summarize earlier responses.", handler=summarize)
    )

    await demo_cache(runtime)
    await demo_dispatch(runtime)


if __name__ == "__main__":
    asyncio.run(main())
