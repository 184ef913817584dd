"""Response and dispatch result domain entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass
class ActionResponse:
    """Structured outcome produced by an action handler.

    Attributes:
        text: Human-readable output
        actions_taken: Names of the actions that contributed, in order
        source: Provenance tag copied from the originating message
        data: Structured payload for machine consumption
    """

    text: str | None = None
    actions_taken: list[str] = field(default_factory=list)
    source: str | None = None
    data: dict[str, Any] | None = None


class DispatchStatus(str, Enum):
    """Lifecycle of a single dispatch."""

    RECEIVED = "received"
    RESOLVING = "resolving"
    VALIDATING = "validating"
    EXECUTING = "executing"
    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"


class FailureStage(str, Enum):
    VALIDATION = "validation"
    HANDLER = "handler"


@dataclass(frozen=True)
class ActionFailure:
    """A recorded, non-fatal failure of one action.

    Attributes:
        action_name: The action that failed
        stage: Whether validate() or the handler failed
        error: Error message
        error_type: Class name of the raised exception
        store_unavailable: True when the failure came from a cache outage
    """

    action_name: str
    stage: FailureStage
    error: str
    error_type: str
    store_unavailable: bool = False


@dataclass
class DispatchResult:
    """Aggregated outcome of dispatching one message.

    Responses are kept in execution order; handlers never see or touch
    this list directly.
    """

    message_id: str
    status: DispatchStatus = DispatchStatus.RECEIVED
    responses: list[ActionResponse] = field(default_factory=list)
    failures: list[ActionFailure] = field(default_factory=list)
    executed: list[str] = field(default_factory=list)

    @property
    def actions_taken(self) -> list[str]:
        """Ordered union of the action names across all responses."""
        seen: list[str] = []
        for response in self.responses:
            for name in response.actions_taken:
                if name not in seen:
                    seen.append(name)
        return seen

    @property
    def ok(self) -> bool:
        return self.status is DispatchStatus.COMPLETED
