"""Exception types raised across the action runtime.

Only registration and store errors ever reach a caller. Validation and
handler failures are wrapped, recorded on the dispatch result and logged.
"""


class ActionRuntimeError(Exception):
    """Base class for all action runtime errors."""


class DuplicateActionError(ActionRuntimeError):
    """An action with the same name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Action '{name}' is already registered")
        self.name = name


class StoreUnavailableError(ActionRuntimeError):
    """The cache medium could not be reached."""


class InvalidCacheKeyError(ActionRuntimeError, ValueError):
    """The owner id, key or value cannot be stored."""


class ActionFailureError(ActionRuntimeError):
    """Base for per-action failures recorded during dispatch.

    Attributes:
        action_name: Name of the action that failed
        cause: The original exception
    """

    stage = "action"

    def __init__(self, action_name: str, cause: BaseException) -> None:
        super().__init__(f"{self.stage} of action '{action_name}' failed: {cause}")
        self.action_name = action_name
        self.cause = cause


class ValidationFailure(ActionFailureError):
    """An action's validate() raised instead of returning a boolean."""

    stage = "validation"


class HandlerFailure(ActionFailureError):
    """An action's handler raised or timed out."""

    stage = "handler"
