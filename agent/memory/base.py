"""
Abstract keyed store interface.

State is a service, not a global.
Conversation code depends only on this interface, not on specific backends.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

Mutator = Callable[[Optional[Any]], Any]


class KeyedStore(ABC):
    """
    Abstract per-key store boundary.

    Key properties:
    - Values are JSON-compatible (str, bool, list, dict, numbers)
    - update() is atomic per key: concurrent updaters of the same key
      run one after another, so no read-modify-write is lost
    - A missing or expired key reads as None
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when missing or expired."""
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store value under key, overwriting any previous value."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, key: str, mutator: Mutator) -> Any:
        """
        Atomically replace the value under key with mutator(current).

        Args:
            key: Store key (usually a sender id)
            mutator: Pure function receiving the current value (or None)
                     and returning the new value

        Returns:
            The new value
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present."""
        raise NotImplementedError
