"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class PutCacheRequest(BaseModel):
    """Request DTO for writing a cache entry.

    The handler will convert this to a CacheService.put call.
    """

    value: Any = Field(..., description="JSON payload to store")
    ttl_seconds: float | None = Field(
        None,
        description="Relative expiry in seconds, measured on the store clock",
        gt=0,
    )
    expires_at: float | None = Field(
        None,
        description="Absolute expiry as a Unix timestamp",
    )

    @model_validator(mode="after")
    def check_single_expiry(self) -> "PutCacheRequest":
        if self.ttl_seconds is not None and self.expires_at is not None:
            raise ValueError("Pass either ttl_seconds or expires_at, not both")
        return self
