"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class CacheEntryResponse(BaseModel):
    """Response DTO for a single cache entry."""

    id: str = Field(..., description="Store-assigned entry id")
    owner_id: str = Field(..., description="Owning scope")
    key: str = Field(..., description="Entry key")
    value: Any = Field(..., description="Stored JSON payload")
    created_at: float = Field(..., description="When the entry was first written (Unix timestamp)")
    expires_at: float | None = Field(None, description="Expiry (Unix timestamp), null for never")


class CacheDeleteResponse(BaseModel):
    """Response DTO for delete operations."""

    success: bool = Field(..., description="Whether the operation succeeded")
    deleted_count: int = Field(..., description="Number of live entries removed", ge=0)
    message: str = Field(..., description="Human-readable status message")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    backend: str = Field(..., description="Storage backend name")
    total_entries: int = Field(..., description="Number of stored entries", ge=0)
    default_ttl: int = Field(..., description="Default TTL in seconds, 0 for none", ge=0)


class ActionInfo(BaseModel):
    """Metadata of one registered action."""

    name: str
    aliases: list[str] = Field(default_factory=list)
    description: str = ""
    example_count: int = Field(0, ge=0)


class ActionListResponse(BaseModel):
    """Response DTO for the registered action list."""

    count: int = Field(..., ge=0)
    actions: list[ActionInfo] = Field(default_factory=list)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
    registered_actions: int = Field(0, ge=0)
