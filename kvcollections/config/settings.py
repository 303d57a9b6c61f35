"""
kv-collections Configuration Settings

Connection and logging options. Every field can be overridden through a
KV_COLLECTIONS_* environment variable.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Store client and logging configuration."""

    # Redis connection; REDIS_URL wins over host/port/db when set
    REDIS_URL: str = os.environ.get("KV_COLLECTIONS_REDIS_URL", "")
    REDIS_HOST: str = os.environ.get("KV_COLLECTIONS_REDIS_HOST", "127.0.0.1")
    REDIS_PORT: int = int(os.environ.get("KV_COLLECTIONS_REDIS_PORT", "6379"))
    REDIS_DB: int = int(os.environ.get("KV_COLLECTIONS_REDIS_DB", "0"))
    REDIS_PASSWORD: Optional[str] = os.environ.get("KV_COLLECTIONS_REDIS_PASSWORD") or None

    # Prepended to every key by the store client
    KEY_PREFIX: str = os.environ.get("KV_COLLECTIONS_KEY_PREFIX", "")

    # In-process backend capacity
    MAX_KEYS: int = int(os.environ.get("KV_COLLECTIONS_MAX_KEYS", "10000"))

    # Logging settings
    DEBUG: bool = os.environ.get("KV_COLLECTIONS_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("KV_COLLECTIONS_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
