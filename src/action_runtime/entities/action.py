"""Declarative action definition.

``ActionDefinition`` satisfies the ``Action`` protocol, so plugin authors can
describe an action as data plus two coroutines instead of writing a class.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from .message import Message
from .response import ActionResponse


@dataclass(frozen=True)
class ActionExample:
    """One turn of a sample dialog shown to action authors and planners.

    Attributes:
        name: Speaker name
        content: Message content for that turn (text, actions, ...)
    """

    name: str
    content: dict[str, Any]


async def always_valid(runtime: Any, message: Message, state: dict[str, Any] | None) -> bool:
    return True


@dataclass(frozen=True)
class ActionDefinition:
    """An action described as data.

    Attributes:
        name: Unique name within a registry
        handler: Coroutine producing the action's response
        validate: Coroutine gating execution, defaults to always valid
        description: Human-readable description
        aliases: Alternative names the action answers to
        examples: Sample dialogs, never used by dispatch
    """

    name: str
    handler: Callable[..., Awaitable[ActionResponse | None]]
    validate: Callable[..., Awaitable[bool]] = always_valid
    description: str = ""
    aliases: tuple[str, ...] = ()
    examples: list[list[ActionExample]] = field(default_factory=list)
