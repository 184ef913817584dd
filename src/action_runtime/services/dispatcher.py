"""Dispatcher for incoming messages.

Runs one message through RESOLVING -> VALIDATING -> EXECUTING and returns
an aggregated DispatchResult. Handlers run one after the other in
registration order, so a later action always sees the cache writes of an
earlier one. Failures are recorded on the result and never raised.
"""

import asyncio
import dataclasses
import logging
from typing import Any

from action_runtime.config import settings
from action_runtime.entities import (
    ActionFailure,
    ActionResponse,
    DispatchResult,
    DispatchStatus,
    FailureStage,
    Message,
)
from action_runtime.errors import HandlerFailure, StoreUnavailableError
from action_runtime.protocols import Action, HandlerCallback, RuntimeContext, State

from .action_registry import ActionRegistry

logger = logging.getLogger(__name__)


class ResponseChannel:
    """Delivers responses to the caller's callback until closed.

    Once closed (the request was cancelled), further responses are dropped
    instead of being delivered. Responses of a single abandoned handler are
    dropped through discard() while the channel stays open for the others.
    """

    def __init__(self, callback: HandlerCallback | None = None) -> None:
        self._callback = callback
        self._closed = False
        self.delivered = 0
        self.discarded = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    async def send(self, response: ActionResponse) -> bool:
        """Forward a response to the callback.

        Returns:
            True if the response was accepted, False if the channel is closed
        """
        if self._closed:
            self.discarded += 1
            logger.debug("Discarded response on closed channel: %r", response.text)
            return False
        if self._callback is not None:
            await self._callback(response)
        self.delivered += 1
        return True

    def discard(self, response: ActionResponse) -> None:
        self.discarded += 1
        logger.debug("Discarded response of abandoned handler: %r", response.text)


def coerce_response(raw: ActionResponse | dict[str, Any]) -> ActionResponse:
    """Accept plain content dicts as well as ActionResponse instances."""
    if isinstance(raw, ActionResponse):
        return raw
    if isinstance(raw, dict):
        return ActionResponse(
            text=raw.get("text"),
            actions_taken=list(raw.get("actions_taken") or raw.get("actions") or []),
            source=raw.get("source"),
            data=raw.get("data"),
        )
    raise TypeError(f"Handler produced {type(raw).__name__}, expected ActionResponse or dict")


class ActionDispatcher:
    """Resolves, validates and executes actions for a message.

    Example:
        ```python
        dispatcher = ActionDispatcher(registry)

        async def on_response(response):
            await websocket.send_json(dataclasses.asdict(response))

        result = await dispatcher.dispatch(runtime, message, callback=on_response)
        if result.status is DispatchStatus.REJECTED:
            ...
        ```
    """

    def __init__(self, registry: ActionRegistry, timeout: float | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Registry the candidates come from.
            timeout: Default time in seconds each handler is waited for.
                0 disables it. Defaults to settings.
        """
        self._registry = registry
        self._timeout = settings.handler_timeout if timeout is None else timeout

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    async def dispatch(
        self,
        runtime: RuntimeContext,
        message: Message,
        state: State | None = None,
        options: dict[str, Any] | None = None,
        callback: HandlerCallback | None = None,
        timeout: float | None = None,
    ) -> DispatchResult:
        """Dispatch a message to every action that validates for it.

        Args:
            runtime: Runtime context handed to validators and handlers
            message: The incoming message
            state: Current request state
            options: Free-form options passed to each handler
            callback: Receives every response as soon as it is produced
            timeout: Per-handler wait in seconds, overrides the default

        Returns:
            DispatchResult with responses in execution order and recorded failures
        """
        result = DispatchResult(message_id=message.id)

        result.status = DispatchStatus.RESOLVING
        candidates = self._registry.resolve_candidates(message)

        result.status = DispatchStatus.VALIDATING
        validated, failures = await self._registry.validate_all(candidates, runtime, message, state)
        result.failures.extend(failures)

        if not validated:
            if candidates and len(failures) == len(candidates) and all(
                f.store_unavailable for f in failures
            ):
                result.status = DispatchStatus.FAILED
                logger.warning(
                    "Cache store unavailable for every candidate of message %s", message.id
                )
                return result
            result.status = DispatchStatus.REJECTED
            logger.info(
                "No action validated for message %s (%d candidates)", message.id, len(candidates)
            )
            return result

        result.status = DispatchStatus.EXECUTING
        channel = ResponseChannel(callback)
        budget = self._timeout if timeout is None else timeout

        try:
            for action in validated:
                await self._execute(
                    action, runtime, message, state, options or {}, channel, result, budget or None
                )
        except asyncio.CancelledError:
            channel.close()
            logger.info("Dispatch of message %s cancelled", message.id)
            raise

        handler_failures = [f for f in result.failures if f.stage is FailureStage.HANDLER]
        failed_names = {f.action_name for f in handler_failures}
        succeeded = [name for name in result.executed if name not in failed_names]

        if handler_failures and not succeeded and not result.responses:
            result.status = DispatchStatus.FAILED
        else:
            result.status = DispatchStatus.COMPLETED

        logger.info(
            "Dispatched message %s: status=%s executed=%s responses=%d failures=%d",
            message.id,
            result.status.value,
            result.executed,
            len(result.responses),
            len(result.failures),
        )
        return result

    async def _execute(
        self,
        action: Action,
        runtime: RuntimeContext,
        message: Message,
        state: State | None,
        options: dict[str, Any],
        channel: ResponseChannel,
        result: DispatchResult,
        timeout: float | None,
    ) -> None:
        """Run one handler, waiting at most ``timeout`` seconds for it.

        A handler that overruns keeps running in the background, but
        nothing it emits afterwards is delivered or collected.
        """
        emitted: list[ActionResponse] = []
        abandoned = False

        async def emit(raw: ActionResponse | dict[str, Any]) -> None:
            response = coerce_response(raw)
            emitted.append(response)
            if abandoned:
                channel.discard(response)
                return
            stamped = self._stamp(response, action, message)
            if await channel.send(stamped):
                result.responses.append(stamped)

        result.executed.append(action.name)
        # Handlers get a snapshot, never the aggregate itself
        prior = list(result.responses)
        task = asyncio.ensure_future(
            action.handler(runtime, message, state, options, emit, prior)
        )

        try:
            # Shielded: a timeout or cancellation stops waiting, not the handler
            returned = await asyncio.wait_for(asyncio.shield(task), timeout)
        except asyncio.TimeoutError:
            task.add_done_callback(self._log_abandoned)
            abandoned = True
            self._record_timeout(result, action, timeout)
            return
        except asyncio.CancelledError:
            task.add_done_callback(self._log_abandoned)
            raise
        except Exception as e:
            self._record_failure(result, action, e)
            return

        if returned is None:
            return

        try:
            response = coerce_response(returned)
        except TypeError as e:
            self._record_failure(result, action, e)
            return

        if not any(response is seen or response == seen for seen in emitted):
            stamped = self._stamp(response, action, message)
            if await channel.send(stamped):
                result.responses.append(stamped)

    @staticmethod
    def _stamp(response: ActionResponse, action: Action, message: Message) -> ActionResponse:
        """Fill in provenance the handler left out."""
        return dataclasses.replace(
            response,
            actions_taken=list(response.actions_taken) or [action.name],
            source=response.source if response.source is not None else message.source,
        )

    @staticmethod
    def _record_failure(result: DispatchResult, action: Action, error: Exception) -> None:
        failure = HandlerFailure(action.name, error)
        logger.warning("%s", failure, exc_info=error)
        result.failures.append(
            ActionFailure(
                action_name=action.name,
                stage=FailureStage.HANDLER,
                error=str(error),
                error_type=type(error).__name__,
                store_unavailable=isinstance(error, StoreUnavailableError),
            )
        )

    @staticmethod
    def _record_timeout(result: DispatchResult, action: Action, timeout: float | None) -> None:
        logger.warning(
            "Action %s timed out after %ss for message %s", action.name, timeout, result.message_id
        )
        result.failures.append(
            ActionFailure(
                action_name=action.name,
                stage=FailureStage.HANDLER,
                error=f"timed out after {timeout}s",
                error_type="TimeoutError",
            )
        )

    @staticmethod
    def _log_abandoned(task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Abandoned handler finished with error: %s", error)
