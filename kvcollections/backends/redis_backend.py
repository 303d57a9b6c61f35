"""
Redis Store Client

Thin async wrapper around redis-py's asyncio client. Connection
handling, pooling and retries are left to redis-py; this class only
applies the key prefix and maps expiry options onto SET.
"""

import logging
from typing import Any, Optional

import redis.asyncio as redis

from ..config.settings import Settings, settings
from .base import ExpireMode

logger = logging.getLogger(__name__)


class RedisBackend:
    """
    Store client backed by a Redis server.

    Usage:
        backend = RedisBackend(host="127.0.0.1", port=6379, key_prefix="EX_")
        await backend.set("users", "[]")
        await backend.get("users")  # '[]'
        await backend.close()

    Attributes:
        key_prefix: String prepended to every key
        client: The underlying redis.asyncio.Redis instance
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            db: int = None,
            password: Optional[str] = None,
            key_prefix: str = None,
            client: Any = None,
            **options: Any,
    ):
        """
        Initialize the backend.

        Args:
            host: Redis host (default from settings)
            port: Redis port (default from settings)
            db: Database number (default from settings)
            password: Redis password (default from settings)
            key_prefix: Key prefix (default from settings)
            client: Pre-built client exposing async get/set; skips connection setup
            **options: Passed straight through to redis.asyncio.Redis
        """
        self.key_prefix = key_prefix if key_prefix is not None else settings.KEY_PREFIX

        if client is not None:
            self.client = client
            return

        self.client = redis.Redis(
            host=host if host is not None else settings.REDIS_HOST,
            port=port if port is not None else settings.REDIS_PORT,
            db=db if db is not None else settings.REDIS_DB,
            password=password if password is not None else settings.REDIS_PASSWORD,
            decode_responses=True,
            **options,
        )

    @classmethod
    def from_url(cls, url: str, key_prefix: str = None, **options: Any) -> "RedisBackend":
        """Create a backend from a redis:// URL."""
        client = redis.Redis.from_url(url, decode_responses=True, **options)
        return cls(key_prefix=key_prefix, client=client)

    @classmethod
    def from_settings(cls, config: Settings = None) -> "RedisBackend":
        """Create a backend from a Settings instance (global settings by default)."""
        config = config if config is not None else settings
        if config.REDIS_URL:
            return cls.from_url(config.REDIS_URL, key_prefix=config.KEY_PREFIX)
        return cls(
            host=config.REDIS_HOST,
            port=config.REDIS_PORT,
            db=config.REDIS_DB,
            password=config.REDIS_PASSWORD,
            key_prefix=config.KEY_PREFIX,
        )

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        """Return the text stored under key, or None if absent."""
        full_key = self._key(key)
        logger.debug(f"GET {full_key}")
        return await self.client.get(full_key)

    async def set(
            self,
            key: str,
            value: str,
            expire_mode: Optional[ExpireMode] = None,
            expires_in: Optional[int] = None,
    ) -> bool:
        """
        Store text under key.

        Expiry is applied only when both expire_mode and expires_in are
        given.

        Returns:
            True if Redis acknowledged the write
        """
        full_key = self._key(key)
        mode = ExpireMode.parse(expire_mode)

        if mode is not None and expires_in:
            logger.debug(f"SET {full_key} {mode.value} {expires_in}")
            if mode is ExpireMode.PX:
                result = await self.client.set(full_key, value, px=expires_in)
            else:
                result = await self.client.set(full_key, value, ex=expires_in)
        else:
            logger.debug(f"SET {full_key}")
            result = await self.client.set(full_key, value)

        return bool(result)

    async def close(self) -> None:
        """Close the underlying connection pool."""
        closer = getattr(self.client, "aclose", None) or getattr(self.client, "close", None)
        if closer is not None:
            await closer()
