"""Action registry and validator.

Holds the registered actions in registration order, resolves which of them
a message asks for, and runs their validators with bounded concurrency.
"""

import asyncio
import logging
import threading
from collections.abc import Callable, Sequence

from action_runtime.config import settings
from action_runtime.entities import ActionFailure, FailureStage, Message
from action_runtime.errors import DuplicateActionError, StoreUnavailableError, ValidationFailure
from action_runtime.protocols import Action, RuntimeContext, State

logger = logging.getLogger(__name__)

ActionMatcher = Callable[[str, Action], bool]


def normalize_action_name(name: str) -> str:
    """Normalize a name for loose matching: "get_info" and "GETINFO" match "GET_INFO"."""
    return name.lower().replace("_", "").strip()


def default_matcher(signal: str, action: Action) -> bool:
    """Match a signal against an action's name or any alias.

    Exact matches win; otherwise names are compared after
    normalize_action_name.
    """
    names = [action.name, *action.aliases]
    if signal in names:
        return True
    wanted = normalize_action_name(signal)
    return any(normalize_action_name(name) == wanted for name in names)


class ActionRegistry:
    """Registry of actions behind the Action protocol.

    Names are unique; aliases may overlap between actions, in which case
    resolution follows registration order.

    Example:
        ```python
        registry = ActionRegistry()
        registry.register(get_info_action)

        candidates = registry.resolve_candidates(message)
        valid, failures = await registry.validate_all(candidates, runtime, message, state)
        ```
    """

    def __init__(
        self,
        matcher: ActionMatcher | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            matcher: Predicate deciding whether a signal selects an action.
                Defaults to default_matcher.
            max_concurrency: Upper bound on validators running at once.
                Defaults to settings.validation_concurrency.
        """
        self._actions: dict[str, Action] = {}
        self._matcher = matcher or default_matcher
        self._max_concurrency = max_concurrency or settings.validation_concurrency
        self._lock = threading.Lock()

    def register(self, action: Action) -> None:
        """Register an action.

        Raises:
            DuplicateActionError: If an action with the same name exists.
        """
        if not action.name:
            raise ValueError("Action name is required")

        with self._lock:
            if action.name in self._actions:
                raise DuplicateActionError(action.name)
            self._actions[action.name] = action

        logger.debug("Registered action %s (aliases=%s)", action.name, list(action.aliases))

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._actions.pop(name, None) is not None

    def get(self, name: str) -> Action | None:
        return self._actions.get(name)

    def list_actions(self) -> list[Action]:
        """Return all actions in registration order."""
        return list(self._actions.values())

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __len__(self) -> int:
        return len(self._actions)

    def resolve_candidates(self, message: Message) -> list[Action]:
        """Find the actions the message's intent signals select.

        Args:
            message: The incoming message; message.actions holds the signals

        Returns:
            Matching actions in registration order, each at most once
        """
        if not message.actions:
            return []

        return [
            action
            for action in self.list_actions()
            if any(self._matcher(signal, action) for signal in message.actions)
        ]

    async def validate_all(
        self,
        candidates: Sequence[Action],
        runtime: RuntimeContext,
        message: Message,
        state: State | None = None,
    ) -> tuple[list[Action], list[ActionFailure]]:
        """Run every candidate's validate() concurrently.

        A validator that raises counts as False; its failure is recorded
        and the others keep running.

        Args:
            candidates: Actions to validate, in registration order
            runtime: Runtime context passed to validators
            message: The incoming message
            state: Current request state

        Returns:
            Tuple of (actions that validated True in input order, failures)
        """
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def check(action: Action) -> bool | ActionFailure:
            async with semaphore:
                try:
                    return bool(await action.validate(runtime, message, state))
                except Exception as e:
                    failure = ValidationFailure(action.name, e)
                    logger.warning("%s", failure)
                    return ActionFailure(
                        action_name=action.name,
                        stage=FailureStage.VALIDATION,
                        error=str(e),
                        error_type=type(e).__name__,
                        store_unavailable=isinstance(e, StoreUnavailableError),
                    )

        outcomes = await asyncio.gather(*(check(action) for action in candidates))

        validated = [action for action, ok in zip(candidates, outcomes) if ok is True]
        failures = [outcome for outcome in outcomes if isinstance(outcome, ActionFailure)]

        for action, outcome in zip(candidates, outcomes):
            if outcome is False:
                logger.debug("Action %s did not validate for message %s", action.name, message.id)

        return validated, failures
