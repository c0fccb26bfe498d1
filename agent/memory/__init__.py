"""
Memory module exports.

Clean interface for conversation code to import state components.
"""

from agent.memory.base import KeyedStore
from agent.memory.in_memory import InMemoryKeyedStore
from agent.memory.sqlite import SQLiteKeyedStore, StoreUnavailableError
from agent.memory.conversation import ConversationStateStore
from agent.memory.history import LocationHistory, LOCATIONS_BACKLOG_LIMIT
from agent.memory.dedup import ProcessedEventCache
from agent.memory.types import (
    CachedProfile,
    ConversationState,
    WeatherRecord,
    location_key,
)

__all__ = [
    # Stores
    "KeyedStore",
    "InMemoryKeyedStore",
    "SQLiteKeyedStore",
    "StoreUnavailableError",
    # Services
    "ConversationStateStore",
    "LocationHistory",
    "LOCATIONS_BACKLOG_LIMIT",
    "ProcessedEventCache",
    # Types
    "CachedProfile",
    "ConversationState",
    "WeatherRecord",
    "location_key",
]
