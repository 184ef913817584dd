import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "action_cache")
    cache_default_ttl: int = int(os.getenv("CACHE_DEFAULT_TTL", "0"))  # 0 = never expires

    # Dispatch
    validation_concurrency: int = int(os.getenv("VALIDATION_CONCURRENCY", "8"))
    handler_timeout: float = float(os.getenv("HANDLER_TIMEOUT", "0"))  # 0 = no timeout

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def is_redis_backend(self) -> bool:
        """Check if the cache is configured to live in Redis.

        Returns:
            True if CACHE_BACKEND is "redis", False otherwise
        """
        return self.cache_backend.lower() == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend.lower() not in ("memory", "redis"):
            raise ValueError(f"CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}")

        if self.cache_default_ttl < 0:
            raise ValueError("CACHE_DEFAULT_TTL must be >= 0")

        if self.validation_concurrency < 1:
            raise ValueError("VALIDATION_CONCURRENCY must be at least 1")

        if self.handler_timeout < 0:
            raise ValueError("HANDLER_TIMEOUT must be >= 0")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
