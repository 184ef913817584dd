"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from fastapi import HTTPException, status

from action_runtime.dto import (
    CacheDeleteResponse,
    CacheEntryResponse,
    CacheStatsResponse,
    PutCacheRequest,
)
from action_runtime.entities import CacheEntryEntity
from action_runtime.errors import InvalidCacheKeyError, StoreUnavailableError
from action_runtime.services import CacheService


def _to_response(entry: CacheEntryEntity) -> CacheEntryResponse:
    return CacheEntryResponse(
        id=entry.id,
        owner_id=entry.owner_id,
        key=entry.key,
        value=entry.value,
        created_at=entry.created_at,
        expires_at=entry.expires_at,
    )


class CacheHandler:
    """HTTP handlers for cache operations.

    This handler delegates business logic to CacheService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes (404 on miss, 503 on store outage)
    - Error handling and responses

    Example:
        ```python
        handler = CacheHandler(cache_service=cache_service)

        @app.get("/cache/{owner_id}/{key}", response_model=CacheEntryResponse)
        async def get_entry(owner_id: str, key: str):
            return await handler.get_entry(owner_id, key)
        ```
    """

    def __init__(self, cache_service: CacheService) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
        """
        self._cache = cache_service

    async def get_entry(self, owner_id: str, key: str) -> CacheEntryResponse:
        """Handle GET /cache/{owner_id}/{key} requests.

        Raises:
            HTTPException: 404 if the entry is missing or expired
        """
        try:
            entry = await self._cache.get(owner_id, key)
        except StoreUnavailableError as e:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
        except InvalidCacheKeyError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to read entry: {e}",
            ) from e

        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No live entry for key '{key}'",
            )
        return _to_response(entry)

    async def put_entry(self, owner_id: str, key: str, request: PutCacheRequest) -> CacheEntryResponse:
        """Handle PUT /cache/{owner_id}/{key} requests."""
        try:
            entry = await self._cache.put(
                owner_id,
                key,
                request.value,
                expires_at=request.expires_at,
                ttl=request.ttl_seconds,
            )
        except StoreUnavailableError as e:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
        except (InvalidCacheKeyError, ValueError) as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to store entry: {e}",
            ) from e

        return _to_response(entry)

    async def delete_entry(self, owner_id: str, key: str) -> CacheDeleteResponse:
        """Handle DELETE /cache/{owner_id}/{key} requests. Always succeeds for missing keys."""
        try:
            deleted = await self._cache.delete(owner_id, key)
        except StoreUnavailableError as e:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
        except InvalidCacheKeyError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to delete entry: {e}",
            ) from e

        return CacheDeleteResponse(
            success=True,
            deleted_count=1 if deleted else 0,
            message="Entry deleted" if deleted else "Nothing to delete",
        )

    async def clear_owner(self, owner_id: str) -> CacheDeleteResponse:
        """Handle DELETE /cache/{owner_id} requests."""
        try:
            count = await self._cache.clear_owner(owner_id)
        except StoreUnavailableError as e:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to clear owner: {e}",
            ) from e

        return CacheDeleteResponse(
            success=True,
            deleted_count=count,
            message=f"Cleared {count} entries for owner '{owner_id}'",
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests."""
        try:
            stats = self._cache.get_stats()
        except StoreUnavailableError as e:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

        return CacheStatsResponse(
            backend=stats.get("backend", "unknown"),
            total_entries=stats.get("total_entries", 0),
            default_ttl=stats.get("default_ttl", 0),
        )
