"""
Conversation state tests: profiles, location history, pending follow-up,
state tag and processed-message dedup.
"""

import asyncio

import pytest

from agent.memory import (
    ConversationState,
    InMemoryKeyedStore,
    LocationHistory,
    ProcessedEventCache,
)


class TestLocationHistory:

    @pytest.mark.asyncio
    async def test_empty_for_unknown_sender(self, history):
        assert await history.list("nobody") == []

    @pytest.mark.asyncio
    async def test_fifo_eviction_at_capacity(self, history):
        await history.record("USER_1", "London", "uk")
        await history.record("USER_1", "Tokyo", "jp")
        await history.record("USER_1", "Paris", "fr")
        assert await history.list("USER_1") == ["London, uk", "Tokyo, jp", "Paris, fr"]

        await history.record("USER_1", "Berlin", "de")

        assert await history.list("USER_1") == ["Tokyo, jp", "Paris, fr", "Berlin, de"]

    @pytest.mark.asyncio
    async def test_duplicate_is_ignored_without_reorder(self, history):
        await history.record("USER_1", "London", "uk")
        await history.record("USER_1", "Tokyo", "jp")

        locations = await history.record("USER_1", "London", "uk")

        assert locations == ["London, uk", "Tokyo, jp"]

    @pytest.mark.asyncio
    async def test_membership_is_case_sensitive(self, history):
        await history.record("USER_1", "London", "uk")
        await history.record("USER_1", "London", "UK")
        assert await history.list("USER_1") == ["London, uk", "London, UK"]

    @pytest.mark.asyncio
    async def test_senders_are_independent(self, history):
        await history.record("USER_1", "London", "uk")
        await history.record("USER_2", "Tokyo", "jp")
        assert await history.list("USER_1") == ["London, uk"]
        assert await history.list("USER_2") == ["Tokyo, jp"]

    @pytest.mark.asyncio
    async def test_concurrent_records_all_land(self):
        history = LocationHistory(InMemoryKeyedStore(), capacity=5)

        await asyncio.gather(
            history.record("USER_1", "London", "uk"),
            history.record("USER_1", "Tokyo", "jp"),
            history.record("USER_1", "Paris", "fr"),
        )

        assert sorted(await history.list("USER_1")) == ["London, uk", "Paris, fr", "Tokyo, jp"]

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            LocationHistory(InMemoryKeyedStore(), capacity=0)


class TestProfiles:

    @pytest.mark.asyncio
    async def test_unknown_sender_has_no_profile(self, conversation):
        assert await conversation.get_profile("USER_1") is None

    @pytest.mark.asyncio
    async def test_cached_profile_is_returned(self, conversation):
        await conversation.cache_profile("USER_1", "Alice")
        profile = await conversation.get_profile("USER_1")
        assert profile.sender_id == "USER_1"
        assert profile.display_name == "Alice"


class TestPendingFollowUp:

    @pytest.mark.asyncio
    async def test_consume_without_mark_is_false(self, conversation):
        assert await conversation.consume_pending("USER_1") is False

    @pytest.mark.asyncio
    async def test_consume_clears_the_flag(self, conversation):
        await conversation.mark_pending("USER_1")
        assert await conversation.has_pending("USER_1") is True

        assert await conversation.consume_pending("USER_1") is True
        assert await conversation.consume_pending("USER_1") is False
        assert await conversation.has_pending("USER_1") is False

    @pytest.mark.asyncio
    async def test_marking_twice_keeps_one_follow_up(self, conversation):
        await conversation.mark_pending("USER_1")
        await conversation.mark_pending("USER_1")

        assert await conversation.consume_pending("USER_1") is True
        assert await conversation.consume_pending("USER_1") is False

    @pytest.mark.asyncio
    async def test_concurrent_consumers_get_one_true(self, conversation):
        await conversation.mark_pending("USER_1")

        results = await asyncio.gather(
            *(conversation.consume_pending("USER_1") for _ in range(5))
        )

        assert results.count(True) == 1


class TestStateTag:

    @pytest.mark.asyncio
    async def test_defaults_to_new(self, conversation):
        assert await conversation.get_state("USER_1") is ConversationState.NEW

    @pytest.mark.asyncio
    async def test_set_and_get(self, conversation):
        await conversation.set_state("USER_1", ConversationState.WEATHER_SENT)
        assert await conversation.get_state("USER_1") is ConversationState.WEATHER_SENT

    @pytest.mark.asyncio
    async def test_unknown_stored_value_reads_as_new(self, conversation):
        await conversation.states.set("USER_1", "something_else")
        assert await conversation.get_state("USER_1") is ConversationState.NEW


class TestProcessedEventCache:

    def test_first_delivery_is_not_seen(self):
        cache = ProcessedEventCache()
        assert cache.seen("USER_1", "mid.1") is False
        assert cache.seen("USER_1", "mid.1") is True

    def test_same_mid_from_other_sender_is_distinct(self):
        cache = ProcessedEventCache()
        cache.seen("USER_1", "mid.1")
        assert cache.seen("USER_2", "mid.1") is False

    def test_oldest_entry_is_evicted(self):
        cache = ProcessedEventCache(max_size=2)
        cache.seen("USER_1", "mid.1")
        cache.seen("USER_1", "mid.2")
        cache.seen("USER_1", "mid.3")

        assert cache.size == 2
        assert cache.seen("USER_1", "mid.1") is False
