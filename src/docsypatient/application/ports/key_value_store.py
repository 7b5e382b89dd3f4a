"""
Key-value storage interface for persisted client state.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional


class KeyValueStore(ABC):
    """Abstract durable string store.

    Implementations raise StorageError for any persistence failure.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Overwrite the value for a key."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        pass

    @abstractmethod
    async def remove_many(self, keys: Iterable[str]) -> None:
        """Remove several keys in a single write."""
        pass
