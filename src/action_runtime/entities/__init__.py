"""Domain entities for internal representation.

These are pure dataclasses used internally by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .action import ActionDefinition, ActionExample
from .cache_entry import CacheEntryEntity, JSONValue
from .message import Message
from .response import ActionFailure, ActionResponse, DispatchResult, DispatchStatus, FailureStage

__all__ = [
    "ActionDefinition",
    "ActionExample",
    "ActionFailure",
    "ActionResponse",
    "CacheEntryEntity",
    "DispatchResult",
    "DispatchStatus",
    "FailureStage",
    "JSONValue",
    "Message",
]
