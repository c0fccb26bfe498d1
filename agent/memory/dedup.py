"""
Processed message cache.

LRU of (sender_id, message_id) pairs so a redelivered message event is
handled once.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

logger = logging.getLogger(__name__)


class ProcessedEventCache:
    """
    LRU cache keyed by (sender_id, mid).

    The platform delivers at least once; this keeps message handlers from
    answering the same message twice. Bounded, oldest evicted first.
    """

    def __init__(self, max_size: int = 10000):
        self.max_size = max_size
        self._cache: OrderedDict[tuple[str, str], bool] = OrderedDict()

    def seen(self, sender_id: str, mid: str) -> bool:
        """
        Mark a message as processed.

        Returns:
            True if it had already been processed (caller should skip)
        """
        key = (sender_id, mid)
        if key in self._cache:
            self._cache.move_to_end(key)
            logger.info(f"Duplicate delivery of message {mid} from {sender_id}")
            return True

        self._cache[key] = True
        while len(self._cache) > self.max_size:
            self._cache.popitem(last=False)
        return False

    def forget(self, sender_id: str, mid: str) -> None:
        """Unmark a message whose handling failed, so a redelivery is handled."""
        self._cache.pop((sender_id, mid), None)

    @property
    def size(self) -> int:
        return len(self._cache)
