"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import PutCacheRequest
from .responses import (
    ActionInfo,
    ActionListResponse,
    CacheDeleteResponse,
    CacheEntryResponse,
    CacheStatsResponse,
    HealthCheckResponse,
)

__all__ = [
    "PutCacheRequest",
    "ActionInfo",
    "ActionListResponse",
    "CacheDeleteResponse",
    "CacheEntryResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
