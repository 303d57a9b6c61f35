"""
Store Client Interface

The collection layer only ever calls two operations on its store client:
get(key) and set(key, value, [expire_mode, expires_in]). Anything that
provides these coroutines can back a CollectionStore.
"""

from enum import Enum
from typing import Optional, Protocol


class ExpireMode(Enum):
    """Unit of the expiry duration passed to set()."""
    EX = "EX"  # seconds
    PX = "PX"  # milliseconds

    @classmethod
    def parse(cls, value) -> Optional["ExpireMode"]:
        """Accept an ExpireMode, its name (any case) or None."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"invalid expire mode: {value!r}") from None


class StoreClient(Protocol):  # pragma: no cover - structural typing helper
    async def get(self, key: str) -> Optional[str]:
        """Return the stored text for key, or None if absent."""
        ...

    async def set(
            self,
            key: str,
            value: str,
            expire_mode: Optional[ExpireMode] = None,
            expires_in: Optional[int] = None,
    ) -> bool:
        """Store text under key, replacing any previous value."""
        ...


def expiry_seconds(expire_mode: Optional[ExpireMode], expires_in: Optional[int]) -> float:
    """
    Convert an (expire_mode, expires_in) pair into seconds.

    Returns 0 (no expiration) unless both values are given and the
    duration is positive.
    """
    mode = ExpireMode.parse(expire_mode)
    if mode is None or not expires_in or expires_in <= 0:
        return 0
    if mode is ExpireMode.PX:
        return expires_in / 1000.0
    return float(expires_in)
