"""
Quick-reply conversation flow.

Transition table keyed by (current state, quick-reply payload) →
(next state, reply action). A wildcard state entry applies whenever no
state-specific entry exists; payloads nobody knows end the conversation.

Every payload answers the same way in every state: a "Yes" tapped on a
stale follow-up still gets "ask away". The stored state is therefore
observational: it is logged and inspectable but never picks the reply.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from agent import replies
from agent.memory.types import ConversationState


class ReplyAction(str, Enum):
    """What to send back after a quick reply."""

    PROMPT_LOCATION = "prompt_location"
    ASK_AWAY = "ask_away"
    OFFER_NEXT_STEP = "offer_next_step"
    OFFER_NEXT_STEP_DECLINED = "offer_next_step_declined"
    CHAT_MENU = "chat_menu"
    FAREWELL = "farewell"


@dataclass(frozen=True)
class Transition:
    next_state: ConversationState
    action: ReplyAction


ANY_STATE: Optional[ConversationState] = None

TransitionKey = Tuple[Optional[ConversationState], str]

TRANSITIONS: Dict[TransitionKey, Transition] = {
    (ANY_STATE, replies.START_WEATHER): Transition(
        ConversationState.AWAITING_LOCATION, ReplyAction.PROMPT_LOCATION
    ),
    (ANY_STATE, replies.NO_WEATHER): Transition(
        ConversationState.CHOOSING_NEXT, ReplyAction.OFFER_NEXT_STEP_DECLINED
    ),
    (ANY_STATE, replies.YES): Transition(
        ConversationState.AWAITING_LOCATION, ReplyAction.ASK_AWAY
    ),
    (ANY_STATE, replies.NO): Transition(
        ConversationState.CHOOSING_NEXT, ReplyAction.OFFER_NEXT_STEP
    ),
    (ANY_STATE, replies.CHAT): Transition(
        ConversationState.CHATTING, ReplyAction.CHAT_MENU
    ),
    (ANY_STATE, replies.EXIT): Transition(
        ConversationState.ENDED, ReplyAction.FAREWELL
    ),
}

DEFAULT_TRANSITION = Transition(ConversationState.ENDED, ReplyAction.FAREWELL)


def next_transition(state: ConversationState, payload: str) -> Transition:
    """Resolve (state, payload); state-specific entries win over wildcards."""
    transition = TRANSITIONS.get((state, payload))
    if transition is None:
        transition = TRANSITIONS.get((ANY_STATE, payload), DEFAULT_TRANSITION)
    return transition
