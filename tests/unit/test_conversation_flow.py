"""
Quick-reply flow, keyword commands and reply composition.
"""

import pytest

from agent import replies
from agent.commands import BUILTIN_COMMANDS, match_command
from agent.flow import DEFAULT_TRANSITION, ReplyAction, next_transition
from agent.memory import ConversationState, WeatherRecord
from transport.messenger.messages import quick_reply_payloads


class TestTransitions:

    @pytest.mark.parametrize(
        "payload, next_state, action",
        [
            (replies.START_WEATHER, ConversationState.AWAITING_LOCATION, ReplyAction.PROMPT_LOCATION),
            (replies.NO_WEATHER, ConversationState.CHOOSING_NEXT, ReplyAction.OFFER_NEXT_STEP_DECLINED),
            (replies.YES, ConversationState.AWAITING_LOCATION, ReplyAction.ASK_AWAY),
            (replies.NO, ConversationState.CHOOSING_NEXT, ReplyAction.OFFER_NEXT_STEP),
            (replies.CHAT, ConversationState.CHATTING, ReplyAction.CHAT_MENU),
            (replies.EXIT, ConversationState.ENDED, ReplyAction.FAREWELL),
        ],
    )
    def test_known_payloads(self, payload, next_state, action):
        transition = next_transition(ConversationState.GREETED, payload)
        assert transition.next_state is next_state
        assert transition.action is action

    @pytest.mark.parametrize("state", list(ConversationState))
    @pytest.mark.parametrize(
        "payload",
        [replies.START_WEATHER, replies.NO_WEATHER, replies.YES, replies.NO, replies.CHAT, replies.EXIT],
    )
    def test_payloads_apply_in_every_state(self, state, payload):
        assert next_transition(state, payload) == next_transition(ConversationState.GREETED, payload)

    def test_yes_after_goodbye_still_asks_away(self):
        assert next_transition(ConversationState.ENDED, replies.YES).action is ReplyAction.ASK_AWAY

    def test_unknown_payload_says_goodbye(self):
        transition = next_transition(ConversationState.WEATHER_SENT, "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_ACTION")
        assert transition == DEFAULT_TRANSITION
        assert transition.action is ReplyAction.FAREWELL

    def test_payload_match_is_case_sensitive(self):
        assert next_transition(ConversationState.GREETED, "start weather") == DEFAULT_TRANSITION


class TestCommands:

    def test_every_keyword_builds_a_payload(self):
        for keyword, builder in BUILTIN_COMMANDS.items():
            payload = builder("USER_1", "https://bot.example.com")
            assert payload["recipient"] == {"id": "USER_1"}, keyword

    def test_match_is_exact(self):
        assert match_command("image") is not None
        assert match_command("Image") is None
        assert match_command("image please") is None
        assert match_command("london, uk") is None

    def test_image_uses_server_url(self):
        payload = match_command("image")("USER_1", "https://bot.example.com")
        attachment = payload["message"]["attachment"]
        assert attachment["type"] == "image"
        assert attachment["payload"]["url"] == "https://bot.example.com/assets/rift.png"

    @pytest.mark.parametrize(
        "keyword, action",
        [("read receipt", "mark_seen"), ("typing on", "typing_on"), ("typing off", "typing_off")],
    )
    def test_sender_actions(self, keyword, action):
        payload = match_command(keyword)("USER_1", "")
        assert payload == {"recipient": {"id": "USER_1"}, "sender_action": action}

    def test_account_linking_points_at_authorize(self):
        payload = match_command("account linking")("USER_1", "https://bot.example.com")
        button = payload["message"]["attachment"]["payload"]["buttons"][0]
        assert button == {"type": "account_link", "url": "https://bot.example.com/authorize"}


class TestReplies:

    def test_initial_quick_reply(self):
        payload = replies.initial_quick_reply("USER_1", "Alice")
        assert "Alice" in payload["message"]["text"]
        assert quick_reply_payloads(payload) == [replies.START_WEATHER, replies.NO_WEATHER]

    def test_follow_up_quick_reply(self):
        payload = replies.follow_up_quick_reply("USER_1")
        assert payload["message"]["text"] == replies.FOLLOW_UP_PROMPT
        assert quick_reply_payloads(payload) == [replies.YES, replies.NO]

    def test_next_action_menu(self):
        payload = replies.next_action_menu("USER_1")
        assert quick_reply_payloads(payload) == [replies.CHAT, replies.EXIT]

    def test_weather_answer_text(self):
        record = WeatherRecord(city="London", country="uk", low="48", high="59", description="Showers")
        assert replies.weather_answer_text(record) == (
            "London will experience Showers weather with a low of 48F and a high of 59F"
        )

    def test_favorites_menu_has_one_button_per_location(self):
        payload = replies.favorites_menu("USER_1", ["London, uk", "Tokyo, jp"])
        element = payload["message"]["attachment"]["payload"]["elements"][0]
        assert [button["payload"] for button in element["buttons"]] == ["London, uk", "Tokyo, jp"]

    def test_chat_menu_has_two_cards(self):
        payload = replies.chat_menu("USER_1", "https://bot.example.com")
        elements = payload["message"]["attachment"]["payload"]["elements"]
        assert len(elements) == 2
        assert elements[0]["image_url"] == "https://bot.example.com/assets/weather.png"
