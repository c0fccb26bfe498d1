"""
Favorite-location history.

Bounded per-sender list of recently queried, distinct locations.
"""

import logging
from typing import List, Optional

from agent.memory.base import KeyedStore

logger = logging.getLogger(__name__)

LOCATIONS_BACKLOG_LIMIT = 3


class LocationHistory:
    """
    FIFO of "city, country" labels per sender.

    Invariants:
    - Never longer than capacity
    - Membership is exact string equality (no case folding)
    - Recording a label already present changes nothing (no reorder)
    """

    def __init__(self, store: KeyedStore, capacity: int = LOCATIONS_BACKLOG_LIMIT):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.store = store
        self.capacity = capacity

    async def record(self, sender_id: str, city: str, country: str) -> List[str]:
        """
        Add "city, country" to the sender's history.

        Returns:
            The sender's history after the update
        """
        label = f"{city}, {country}"

        def _append(current: Optional[List[str]]) -> List[str]:
            locations = list(current or [])
            if label in locations:
                return locations
            locations.append(label)
            # Oldest first; drop from the front
            while len(locations) > self.capacity:
                locations.pop(0)
            return locations

        locations = await self.store.update(sender_id, _append)
        logger.debug(f"Location history for {sender_id}: {locations}")
        return locations

    async def list(self, sender_id: str) -> List[str]:
        """Return the sender's history, oldest first. Empty when unknown."""
        return list(await self.store.get(sender_id) or [])
