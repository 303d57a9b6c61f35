"""Store clients the collection layer can run on."""

from .base import ExpireMode, StoreClient
from .memory import MemoryBackend
from .redis_backend import RedisBackend

__all__ = ["ExpireMode", "MemoryBackend", "RedisBackend", "StoreClient"]
