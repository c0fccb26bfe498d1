"""
Messenger Normalization Tests

Webhook body → classified events, one handler kind per event.
"""

import pytest

from transport.messenger.normalize import (
    MalformedEventError,
    NormalizationError,
    classify_kind,
    iter_page_events,
    normalize_event,
    parse_payload,
)
from transport.messenger.schemas import EventKind


class TestClassification:

    @pytest.mark.parametrize(
        "builder, kind",
        [
            ("optin", EventKind.OPTIN),
            ("attachment", EventKind.MESSAGE),
            ("delivery", EventKind.DELIVERY),
            ("postback", EventKind.POSTBACK),
            ("read", EventKind.READ),
            ("account_linking", EventKind.ACCOUNT_LINKING),
        ],
    )
    def test_each_kind(self, events, builder, kind):
        raw = getattr(events, builder)("USER_1")
        assert classify_kind(raw) is kind

    def test_text_message(self, events):
        assert classify_kind(events.text("USER_1", "hi")) is EventKind.MESSAGE

    def test_no_known_field_is_unknown(self, events):
        raw = events._base("USER_1", policy_enforcement={"action": "block"})
        assert classify_kind(raw) is EventKind.UNKNOWN

    def test_first_field_in_priority_order_wins(self, events):
        raw = events.text("USER_1", "hi")
        raw["delivery"] = {"mids": [], "watermark": 1}
        raw["optin"] = {"ref": "x"}
        assert classify_kind(raw) is EventKind.OPTIN

    def test_null_field_is_absent(self, events):
        raw = events.postback("USER_1")
        raw["message"] = None
        assert classify_kind(raw) is EventKind.POSTBACK


class TestNormalizeEvent:

    def test_numeric_ids_become_strings(self, events):
        raw = events.text("USER_1", "hi")
        raw["sender"]["id"] = 1234567890
        classified = normalize_event(raw, "PAGE_1")
        assert classified.event.sender_id == "1234567890"
        assert classified.page_id == "PAGE_1"

    def test_missing_sender_is_malformed(self, events):
        raw = events.text("USER_1", "hi")
        del raw["sender"]
        with pytest.raises(MalformedEventError):
            normalize_event(raw)

    def test_not_an_object_is_malformed(self):
        with pytest.raises(MalformedEventError):
            normalize_event(["not", "an", "event"])

    def test_quick_reply_payload_is_parsed(self, events):
        classified = normalize_event(events.quick_reply("USER_1", "Start Weather"))
        assert classified.event.message.quick_reply.payload == "Start Weather"


class TestPagePayload:

    def test_parse_rejects_non_objects(self):
        with pytest.raises(NormalizationError):
            parse_payload(["page"])

    def test_parse_requires_object_field(self):
        with pytest.raises(NormalizationError):
            parse_payload({"entry": []})

    def test_events_keep_order_across_entries(self, events):
        body = events.page(events.text("USER_1", "first"), events.text("USER_2", "second"))
        body["entry"].append({"id": "PAGE_2", "time": 1, "messaging": [events.read("USER_3")]})

        classified = list(iter_page_events(parse_payload(body)))

        assert [c.event.sender_id for c in classified] == ["USER_1", "USER_2", "USER_3"]
        assert [c.page_id for c in classified] == ["PAGE_1", "PAGE_1", "PAGE_2"]

    def test_malformed_event_is_skipped_not_fatal(self, events):
        broken = events.text("USER_1", "broken")
        del broken["recipient"]
        body = events.page(broken, events.text("USER_2", "fine"))

        classified = list(iter_page_events(parse_payload(body)))

        assert len(classified) == 1
        assert classified[0].event.sender_id == "USER_2"

    def test_malformed_entry_is_skipped(self, events):
        body = events.page(events.text("USER_1", "fine"))
        body["entry"].insert(0, {"id": "PAGE_0", "messaging": "not a list"})

        classified = list(iter_page_events(parse_payload(body)))

        assert [c.event.sender_id for c in classified] == ["USER_1"]

    def test_null_event_does_not_drop_its_siblings(self, events):
        body = events.page(None, events.optin("USER_2"))

        classified = list(iter_page_events(parse_payload(body)))

        assert [c.kind for c in classified] == [EventKind.OPTIN]
        assert classified[0].event.sender_id == "USER_2"

    def test_non_object_entry_is_skipped_alone(self, events):
        body = events.page(events.text("USER_1", "fine"))
        body["entry"].insert(0, "garbage")

        classified = list(iter_page_events(parse_payload(body)))

        assert [c.event.sender_id for c in classified] == ["USER_1"]
