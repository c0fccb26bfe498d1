"""
Event Router

Dispatches classified messaging events to their handlers.

Rules:
- Exactly one handler per event, chosen by EventKind
- Events of one sender are handled one at a time, in arrival order
- A failing handler is logged and never affects sibling events
- Upstream failures fail open: default name, apology text
"""

import asyncio
import logging
import weakref
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, TypeVar

from agent import replies
from agent.commands import match_command
from agent.flow import ReplyAction, next_transition
from agent.memory import (
    ConversationState,
    ConversationStateStore,
    LocationHistory,
    ProcessedEventCache,
    WeatherRecord,
)
from services.weather import WeatherInfoCache
from transport.messenger.base import MessageSender, ProfileLookup, ProfileResult, SendResult
from transport.messenger.normalize import ClassifiedEvent
from transport.messenger.schemas import EventKind, MessagingEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventRouter:
    """
    Webhook event dispatch engine.

    Collaborators are injected; the router owns no global state apart
    from its per-sender locks.
    """

    def __init__(
        self,
        sender: MessageSender,
        profile_lookup: ProfileLookup,
        conversation: ConversationStateStore,
        history: LocationHistory,
        weather: WeatherInfoCache,
        processed: Optional[ProcessedEventCache] = None,
        server_url: str = "",
        default_username: str = replies.DEFAULT_USERNAME,
        call_timeout: Optional[float] = None,
    ):
        self.sender = sender
        self.profile_lookup = profile_lookup
        self.conversation = conversation
        self.history = history
        self.weather = weather
        self.processed = processed
        self.server_url = server_url.rstrip("/")
        self.default_username = default_username
        self.call_timeout = call_timeout
        # Entries vanish once no dispatch holds or waits on the lock
        self._sender_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

        self._handlers: Dict[EventKind, Callable[[MessagingEvent], Awaitable[None]]] = {
            EventKind.OPTIN: self.handle_optin,
            EventKind.MESSAGE: self.handle_message,
            EventKind.DELIVERY: self.handle_delivery,
            EventKind.POSTBACK: self.handle_postback,
            EventKind.READ: self.handle_read,
            EventKind.ACCOUNT_LINKING: self.handle_account_linking,
        }

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lock_for(self, sender_id: str) -> asyncio.Lock:
        lock = self._sender_locks.get(sender_id)
        if lock is None:
            lock = asyncio.Lock()
            self._sender_locks[sender_id] = lock
        return lock

    async def dispatch_batch(self, events: Sequence[ClassifiedEvent]) -> None:
        """Handle a webhook batch. Returns when every event is done."""
        if not events:
            return
        await asyncio.gather(*(self.dispatch(event) for event in events))
        logger.debug(f"Batch of {len(events)} events handled")

    async def dispatch(self, classified: ClassifiedEvent) -> None:
        """Handle one event. Never raises."""
        event = classified.event
        sender_id = event.sender_id

        async with self._lock_for(sender_id):
            handler = self._handlers.get(classified.kind)
            if handler is None:
                logger.info(
                    f"Webhook received unknown messaging event from {sender_id}",
                    extra={"sender_id": sender_id, "page_id": classified.page_id},
                )
                return
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    f"Handler for {classified.kind.value} event failed: {e}",
                    exc_info=True,
                    extra={"sender_id": sender_id},
                )
                # A redelivery of a failed message must be handled again
                if event.message is not None and event.message.mid and self.processed is not None:
                    self.processed.forget(sender_id, event.message.mid)

    # ------------------------------------------------------------------
    # Outbound calls
    # ------------------------------------------------------------------

    async def _bounded(self, call: Awaitable[T], on_timeout: Callable[[], T]) -> T:
        if self.call_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.call_timeout)
        except asyncio.TimeoutError:
            return on_timeout()

    async def send(self, payload: Dict[str, Any]) -> SendResult:
        recipient_id = str(payload.get("recipient", {}).get("id", ""))
        result = await self._bounded(
            self.sender.send(payload),
            lambda: SendResult(status="error", recipient_id=recipient_id, error="timeout"),
        )
        if not result.ok:
            logger.warning(f"Message to {recipient_id} not delivered: {result.error}")
        return result

    async def fetch_profile(self, sender_id: str) -> ProfileResult:
        return await self._bounded(
            self.profile_lookup.fetch(sender_id),
            lambda: ProfileResult(status="error", error="timeout"),
        )

    async def lookup_weather(self, text: str) -> Optional[WeatherRecord]:
        return await self._bounded(self.weather.lookup_text(text), lambda: None)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def handle_optin(self, event: MessagingEvent) -> None:
        """Authentication callback from the "Send to Messenger" plugin."""
        logger.info(
            f"Received authentication for user {event.sender_id} and page "
            f"{event.recipient.id} with pass through param '{event.optin.ref}' "
            f"at {event.timestamp}"
        )
        await self.send(replies.text(event.sender_id, replies.OPTIN_GREETING))

    async def handle_message(self, event: MessagingEvent) -> None:
        sender_id = event.sender_id
        message = event.message

        if message.is_echo:
            logger.debug(
                f"Received echo for message {message.mid} and app {message.app_id} "
                f"with metadata {message.metadata}"
            )
            return

        if message.mid and self.processed is not None and self.processed.seen(sender_id, message.mid):
            return

        if message.quick_reply is not None:
            logger.info(f"Quick reply for message {message.mid} with payload {message.quick_reply.payload}")
            await self.handle_quick_reply(sender_id, message.quick_reply.payload)
            return

        if message.text:
            builder = match_command(message.text)
            if builder is not None:
                await self.send(builder(sender_id, self.server_url))
            else:
                await self.answer_weather_query(sender_id, message.text)
        elif message.attachments:
            await self.send(replies.text(sender_id, replies.ATTACHMENT_RECEIVED))

    async def answer_weather_query(self, sender_id: str, text: str) -> Optional[WeatherRecord]:
        """
        Answer free text as a "city, country" weather query.

        On failure the sender gets the apology and no state changes.
        """
        record = await self.lookup_weather(text)
        if record is None:
            logger.info(f"No weather info for {sender_id}'s query {text!r}")
            await self.send(replies.text(sender_id, replies.WEATHER_APOLOGY))
            return None

        result = await self.send(replies.weather_answer(sender_id, record))
        await self.history.record(sender_id, record.city, record.country)
        if result.ok:
            await self.conversation.mark_pending(sender_id)
            await self.conversation.set_state(sender_id, ConversationState.WEATHER_SENT)
        return record

    async def handle_delivery(self, event: MessagingEvent) -> None:
        """Delivery confirmation: send a pending follow-up, if any."""
        sender_id = event.sender_id
        delivery = event.delivery
        for mid in delivery.mids or []:
            logger.debug(f"Received delivery confirmation for message ID: {mid}")
        logger.debug(f"All messages before {delivery.watermark} were delivered.")

        if not await self.conversation.consume_pending(sender_id):
            logger.debug(f"No pending quick-replies for user {sender_id}")
            return

        logger.info(f"User {sender_id} has pending quick reply!")
        await self.send(replies.follow_up_quick_reply(sender_id))

    async def handle_postback(self, event: MessagingEvent) -> None:
        """
        Button tap.

        First postback from a sender greets them by name; later ones offer
        their favorite locations.
        """
        sender_id = event.sender_id
        logger.info(
            f"Received postback for user {sender_id} and page {event.recipient.id} "
            f"with payload '{event.postback.payload}' at {event.timestamp}"
        )

        profile = await self.conversation.get_profile(sender_id)
        if profile is None:
            await self._greet_new_sender(sender_id)
            return

        locations = await self.history.list(sender_id)
        if locations:
            await self.send(replies.favorites_menu(sender_id, locations))
        else:
            logger.info(f"No locations found for {sender_id}, sending initial question")
            await self.send(replies.initial_quick_reply(sender_id, profile.display_name))
            await self.conversation.set_state(sender_id, ConversationState.GREETED)

    async def _greet_new_sender(self, sender_id: str) -> None:
        result = await self.fetch_profile(sender_id)
        if result.ok:
            user_name = result.first_name or self.default_username
            await self.conversation.cache_profile(sender_id, user_name)
        else:
            # Not cached: the next postback tries the lookup again
            logger.warning(f"Error fetching user profile for {sender_id}: {result.error}")
            user_name = self.default_username

        await self.send(replies.initial_quick_reply(sender_id, user_name))
        await self.conversation.set_state(sender_id, ConversationState.GREETED)

    async def handle_quick_reply(self, sender_id: str, payload: str) -> None:
        state = await self.conversation.get_state(sender_id)
        transition = next_transition(state, payload)
        logger.info(
            f"Quick reply '{payload}' from {sender_id}: "
            f"{state.value} -> {transition.next_state.value} ({transition.action.value})"
        )
        await self.conversation.set_state(sender_id, transition.next_state)
        await self.send(await self._compose(sender_id, transition.action))

    async def _compose(self, sender_id: str, action: ReplyAction) -> Dict[str, Any]:
        if action is ReplyAction.PROMPT_LOCATION:
            return replies.text(sender_id, replies.LOCATION_PROMPT)
        if action is ReplyAction.ASK_AWAY:
            return replies.text(sender_id, replies.ASK_AWAY)
        if action is ReplyAction.OFFER_NEXT_STEP:
            return replies.next_action_menu(sender_id, replies.NEXT_ACTION_PROMPT)
        if action is ReplyAction.OFFER_NEXT_STEP_DECLINED:
            return replies.next_action_menu(sender_id, replies.NEXT_ACTION_PROMPT_DECLINED)
        if action is ReplyAction.CHAT_MENU:
            return replies.chat_menu(sender_id, self.server_url)

        profile = await self.conversation.get_profile(sender_id)
        user_name = profile.display_name if profile else self.default_username
        return replies.farewell(sender_id, user_name)

    async def handle_read(self, event: MessagingEvent) -> None:
        logger.info(
            f"Received message read event for watermark {event.read.watermark} "
            f"and sequence number {event.read.seq}"
        )

    async def handle_account_linking(self, event: MessagingEvent) -> None:
        linking = event.account_linking
        logger.info(
            f"Received account link event for user {event.sender_id} with status "
            f"{linking.status} and auth code {linking.authorization_code}"
        )
