"""
kv-collections: record collections on top of a key-value store

Stores a whole list of records under a single key and runs filtered
queries (find, find_one, save_or_update, delete, find_or_create)
over the deserialized list.
"""

from .backends import ExpireMode, MemoryBackend, RedisBackend
from .collection import NOT_FOUND, CollectionStore
from .errors import CollectionError
from .query import FindOptions, Operator, compose_predicate

__version__ = "1.0.0"

__all__ = [
    "CollectionError",
    "CollectionStore",
    "ExpireMode",
    "FindOptions",
    "MemoryBackend",
    "NOT_FOUND",
    "Operator",
    "RedisBackend",
    "compose_predicate",
]
