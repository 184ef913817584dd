from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from action_runtime.api.dependencies import ActionHandlerDep, CacheHandlerDep, lifespan
from action_runtime.config import settings
from action_runtime.dto import (
    ActionListResponse,
    CacheDeleteResponse,
    CacheEntryResponse,
    CacheStatsResponse,
    HealthCheckResponse,
    PutCacheRequest,
)

app = FastAPI(
    title="Action Runtime API",
    description="Owner-scoped cache and registered action metadata",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Action Runtime API",
        "version": "0.1.0",
        "description": "Owner-scoped cache and registered action metadata",
        "endpoints": {
            "cache": "/cache/{owner_id}/{key}",
            "actions": "/actions",
            "stats": "/stats",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: ActionHandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.get("/actions", response_model=ActionListResponse)
async def list_actions(handler: ActionHandlerDep) -> ActionListResponse:
    """List registered actions."""
    return await handler.list_actions()


@app.get("/cache/{owner_id}/{key}", response_model=CacheEntryResponse)
async def get_entry(owner_id: str, key: str, handler: CacheHandlerDep) -> CacheEntryResponse:
    """Read a live cache entry."""
    return await handler.get_entry(owner_id, key)


@app.put("/cache/{owner_id}/{key}", response_model=CacheEntryResponse)
async def put_entry(
    owner_id: str,
    key: str,
    request: PutCacheRequest,
    handler: CacheHandlerDep,
) -> CacheEntryResponse:
    """Insert or replace a cache entry."""
    return await handler.put_entry(owner_id, key, request)


@app.delete("/cache/{owner_id}/{key}", response_model=CacheDeleteResponse)
async def delete_entry(owner_id: str, key: str, handler: CacheHandlerDep) -> CacheDeleteResponse:
    """Delete a cache entry."""
    return await handler.delete_entry(owner_id, key)


@app.delete("/cache/{owner_id}", response_model=CacheDeleteResponse)
async def clear_owner(owner_id: str, handler: CacheHandlerDep) -> CacheDeleteResponse:
    """Delete every entry of an owner."""
    return await handler.clear_owner(owner_id)


@app.get("/stats", response_model=CacheStatsResponse)
async def get_stats(handler: CacheHandlerDep) -> CacheStatsResponse:
    """Get cache statistics."""
    return await handler.get_stats()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "action_runtime.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
