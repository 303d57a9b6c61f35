"""
In-Process Store Client

A store client that keeps serialized collections in process memory.
It speaks the same get/set interface as RedisBackend, so a
CollectionStore can run on it without a Redis server (tests, scripts,
single-process tools).

Features:
- TTL: values written with an expiry disappear once it passes
- LRU Eviction: when max_keys is reached, the least recently used key
  is evicted
"""

import logging
import time
from collections import OrderedDict
from typing import Optional, Tuple

from ..config.settings import settings
from .base import ExpireMode, expiry_seconds

logger = logging.getLogger(__name__)


class MemoryBackend:
    """
    In-memory key-value store client with TTL and LRU eviction.

    Internal Storage:
        Uses OrderedDict for O(1) operations with LRU ordering.
        Format: prefixed key -> (value, expiration_timestamp)
        expiration_timestamp = 0 means no expiration

    Attributes:
        max_keys: Maximum number of keys held before eviction
        key_prefix: String prepended to every key
    """

    def __init__(self, max_keys: int = None, key_prefix: str = None):
        """
        Initialize the backend.

        Args:
            max_keys: Maximum number of keys (default from settings.MAX_KEYS)
            key_prefix: Key prefix (default from settings.KEY_PREFIX)
        """
        self.max_keys = max_keys if max_keys is not None else settings.MAX_KEYS
        if self.max_keys <= 0:
            raise ValueError("max_keys must be positive")
        self.key_prefix = key_prefix if key_prefix is not None else settings.KEY_PREFIX

        self._store: "OrderedDict[str, Tuple[str, float]]" = OrderedDict()

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    @staticmethod
    def _is_expired(expires_at: float, now: float) -> bool:
        return 0 < expires_at <= now

    def _live_value(self, full_key: str) -> Optional[str]:
        """Value under full_key, dropping the entry first if it has expired."""
        entry = self._store.get(full_key)
        if entry is None:
            return None
        if self._is_expired(entry[1], time.time()):
            del self._store[full_key]
            return None
        return entry[0]

    async def get(self, key: str) -> Optional[str]:
        """
        Retrieve the value stored under key.

        Reading a key marks it as most recently used.

        Returns:
            The value if found and not expired, None otherwise
        """
        full_key = self._key(key)
        value = self._live_value(full_key)
        if value is not None:
            self._store.move_to_end(full_key)
        return value

    async def set(
            self,
            key: str,
            value: str,
            expire_mode: Optional[ExpireMode] = None,
            expires_in: Optional[int] = None,
    ) -> bool:
        """
        Insert or replace the value stored under key.

        Args:
            key: The key to store
            value: Serialized text
            expire_mode: ExpireMode.EX (seconds) or ExpireMode.PX (milliseconds)
            expires_in: Expiry duration in expire_mode units

        Returns:
            True on success
        """
        if not isinstance(value, str):
            raise TypeError(f"value must be str, got {type(value).__name__}")

        ttl = expiry_seconds(expire_mode, expires_in)
        expires_at = time.time() + ttl if ttl > 0 else 0
        full_key = self._key(key)

        if full_key not in self._store and len(self._store) >= self.max_keys:
            evicted, _ = self._store.popitem(last=False)
            logger.debug(f"Evicted least recently used key {evicted}")

        self._store[full_key] = (value, expires_at)
        self._store.move_to_end(full_key)
        return True

    def size(self) -> int:
        """
        Get the current number of keys held.

        Note: This may include expired keys that haven't been cleaned up yet.
        """
        return len(self._store)

    def clear(self) -> None:
        """Remove all keys."""
        self._store.clear()

    def cleanup_expired(self) -> int:
        """
        Remove all expired keys (active expiration).

        Returns:
            Number of keys removed
        """
        now = time.time()
        expired = [k for k, (_, exp) in self._store.items() if self._is_expired(exp, now)]
        for full_key in expired:
            del self._store[full_key]
        if expired:
            logger.debug(f"Removed {len(expired)} expired keys")
        return len(expired)
