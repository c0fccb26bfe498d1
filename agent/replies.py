"""
Conversation replies.

Every outbound message the conversation produces is composed here, so the
router only decides *which* reply to send.
"""

from typing import Any, Dict, Sequence

from agent.memory.types import WeatherRecord
from transport.messenger import messages

DEFAULT_USERNAME = "friend"

OPTIN_GREETING = "Hello friend!"
ATTACHMENT_RECEIVED = "Message with attachment received"
LOCATION_PROMPT = (
    "Please enter the city and country code for the place whose weather "
    "you want to know! For instance, 'menlo park, us'"
)
ASK_AWAY = "Ask away!"
NEXT_ACTION_PROMPT = "What would you like to do next?"
NEXT_ACTION_PROMPT_DECLINED = "What would you like to do then?"
FOLLOW_UP_PROMPT = "Would you like to check out the weather forecast for another location?"
FAVORITES_PROMPT = "Wanna check out the weather of one of your favorite locations?"
WEATHER_APOLOGY = "Sorry, I got nothing for that city/country combo. Check if it's valid?"

# Quick-reply payloads
START_WEATHER = "Start Weather"
NO_WEATHER = "No Weather"
YES = "Yes"
NO = "No"
CHAT = "chat"
EXIT = "exit"

WEATHER_SITE_URL = "https://weather.com/"
CAT_PICS_URL = "https://www.buzzfeed.com/expresident/best-cat-pictures"


def text(recipient_id: str, body: str) -> Dict[str, Any]:
    return messages.text_message(recipient_id, body)


def initial_quick_reply(recipient_id: str, user_name: str) -> Dict[str, Any]:
    return messages.quick_reply_message(
        recipient_id,
        f"Hello there {user_name}! Would you like to check out today's weather for some location?",
        [("Yes, please!", START_WEATHER), ("No, thanks!", NO_WEATHER)],
    )


def follow_up_quick_reply(recipient_id: str) -> Dict[str, Any]:
    return messages.quick_reply_message(
        recipient_id,
        FOLLOW_UP_PROMPT,
        [("Yes!", YES), ("No, thank you", NO)],
    )


def next_action_menu(recipient_id: str, prompt: str = NEXT_ACTION_PROMPT) -> Dict[str, Any]:
    return messages.quick_reply_message(
        recipient_id,
        prompt,
        [("Chit-chat :)", CHAT), ("Bid Farewell", EXIT)],
    )


def chat_menu(recipient_id: str, server_url: str) -> Dict[str, Any]:
    """Two cards: the weather site, and something that is not weather."""
    elements = [
        {
            "title": "The OFFICIAL source of weather info",
            "subtitle": "Don't trust a bot? Get it from the horse's mouth ;)",
            "item_url": WEATHER_SITE_URL,
            "image_url": f"{server_url}/assets/weather.png",
            "buttons": [
                messages.web_url_button(WEATHER_SITE_URL),
                messages.postback_button("I like this!", "like_weather"),
            ],
        },
        {
            "title": "Random Cat pic :D",
            "subtitle": "Bored of weather? Check out some cute cat pics :P",
            "item_url": CAT_PICS_URL,
            "image_url": f"{server_url}/assets/kitten.png",
            "buttons": [
                messages.web_url_button(CAT_PICS_URL),
                messages.postback_button("This is awesome!", "like_cat"),
            ],
        },
    ]
    return messages.generic_template(recipient_id, elements)


def favorites_menu(recipient_id: str, locations: Sequence[str]) -> Dict[str, Any]:
    """One postback button per remembered location."""
    buttons = [messages.postback_button(location, location) for location in locations]
    return messages.generic_template(
        recipient_id,
        [{"title": FAVORITES_PROMPT, "buttons": buttons}],
    )


def farewell(recipient_id: str, user_name: str) -> Dict[str, Any]:
    return text(recipient_id, f"Adios {user_name}!")


def weather_answer_text(record: WeatherRecord) -> str:
    return (
        f"{record.city} will experience {record.description} weather "
        f"with a low of {record.low}F and a high of {record.high}F"
    )


def weather_answer(recipient_id: str, record: WeatherRecord) -> Dict[str, Any]:
    return text(recipient_id, weather_answer_text(record))
