"""
Per-sender conversation state.

Holds the cached display name, the single-slot pending follow-up flag and
the explicit conversation state tag. Each lives in its own keyed store.
"""

import logging
from typing import Optional

from agent.memory.base import KeyedStore
from agent.memory.types import CachedProfile, ConversationState, parse_state

logger = logging.getLogger(__name__)


class ConversationStateStore:
    """
    Conversation state service.

    - Profiles: written once on first postback, never refreshed
    - Pending follow-up: one boolean slot; setting it twice keeps one
      follow-up (last-wins), consuming it clears it at most once
    - State tag: current ConversationState, NEW when unknown
    """

    def __init__(
        self,
        profiles: KeyedStore,
        pending: KeyedStore,
        states: KeyedStore,
    ):
        self.profiles = profiles
        self.pending = pending
        self.states = states

    # Profiles

    async def get_profile(self, sender_id: str) -> Optional[CachedProfile]:
        name = await self.profiles.get(sender_id)
        if name is None:
            return None
        return CachedProfile(sender_id=sender_id, display_name=name)

    async def cache_profile(self, sender_id: str, display_name: str) -> CachedProfile:
        await self.profiles.set(sender_id, display_name)
        logger.info(f"Cached profile name for {sender_id}")
        return CachedProfile(sender_id=sender_id, display_name=display_name)

    # Pending follow-up

    async def mark_pending(self, sender_id: str) -> None:
        await self.pending.set(sender_id, True)

    async def has_pending(self, sender_id: str) -> bool:
        return bool(await self.pending.get(sender_id))

    async def consume_pending(self, sender_id: str) -> bool:
        """
        Atomically read and clear the pending flag.

        Returns:
            True if a follow-up was pending (caller should send it)
        """
        was_pending = False

        def _clear(current: Optional[bool]) -> bool:
            nonlocal was_pending
            was_pending = bool(current)
            return False

        await self.pending.update(sender_id, _clear)
        return was_pending

    # State tag

    async def get_state(self, sender_id: str) -> ConversationState:
        return parse_state(await self.states.get(sender_id))

    async def set_state(self, sender_id: str, state: ConversationState) -> None:
        await self.states.set(sender_id, state.value)
