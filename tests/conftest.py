"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import json
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

from kvcollections.backends.memory import MemoryBackend
from kvcollections.collection import CollectionStore


USERS_KEY = "users"

USERS = [
    {"id": 1, "username": "A"},
    {"id": 2, "username": "B"},
]


# ============================================================================
# Backend Fixtures
# ============================================================================

@pytest.fixture
def backend() -> MemoryBackend:
    """Create a fresh in-memory backend (100 keys, no prefix)."""
    return MemoryBackend(max_keys=100, key_prefix="")


@pytest.fixture
def small_backend() -> MemoryBackend:
    """Create an in-memory backend with small capacity for eviction testing (3 keys)."""
    return MemoryBackend(max_keys=3, key_prefix="")


class RecordingClient:
    """
    Stand-in for redis.asyncio.Redis.

    Keeps values in a dict and records every call so tests can check
    exactly what was sent to the server.
    """

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.calls: List[tuple] = []
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        self.calls.append(("get", key))
        return self.data.get(key)

    async def set(self, key: str, value: str, **kwargs: Any) -> bool:
        self.calls.append(("set", key, value, kwargs))
        self.data[key] = value
        return True

    async def aclose(self) -> None:
        self.closed = True


class FailingClient:
    """Store client whose every command fails."""

    async def get(self, key: str) -> Optional[str]:
        raise ConnectionError("connection refused")

    async def set(self, key: str, value: str, *args: Any) -> bool:
        raise ConnectionError("connection refused")


@pytest.fixture
def recording_client() -> RecordingClient:
    """Create a recording stand-in for the redis client."""
    return RecordingClient()


# ============================================================================
# Collection Fixtures
# ============================================================================

@pytest.fixture
def store(backend: MemoryBackend) -> CollectionStore:
    """Create a CollectionStore over an empty in-memory backend."""
    return CollectionStore(backend)


@pytest_asyncio.fixture
async def users_store(backend: MemoryBackend) -> CollectionStore:
    """Create a CollectionStore with the users collection already stored."""
    await backend.set(USERS_KEY, json.dumps(USERS))
    return CollectionStore(backend)


@pytest.fixture
def failing_store() -> CollectionStore:
    """Create a CollectionStore whose store client always fails."""
    return CollectionStore(FailingClient())


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


