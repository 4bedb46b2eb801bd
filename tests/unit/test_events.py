"""Tests for webhook body decoding into InboundEvents."""

from __future__ import annotations

import pytest

from app.errors import ParseError
from app.events import InboundEvent, parse_events
from tests.conftest import make_messaging, make_payload, payload_bytes


class TestParseEvents:
    def test_single_message(self) -> None:
        body = payload_bytes(make_payload(make_messaging(sender="U1", text="hi", mid="m1")))
        assert parse_events(body) == [
            InboundEvent(
                sender_id="U1",
                recipient_id="PAGE1",
                message_text="hi",
                timestamp_millis=1458692752478,
                message_id="m1",
            )
        ]

    def test_empty_entry_list(self) -> None:
        assert parse_events(b'{"object": "page", "entry": []}') == []

    def test_entry_without_messaging(self) -> None:
        assert parse_events(b'{"object": "page", "entry": [{"id": "P", "time": 1}]}') == []

    def test_multiple_entries_and_items(self) -> None:
        payload = make_payload(
            make_messaging(sender="A", text="one", mid="m1"),
            make_messaging(sender="B", text="two", mid="m2"),
            entries=2,
        )
        events = parse_events(payload_bytes(payload))
        assert [e.sender_id for e in events] == ["A", "B", "A", "B"]

    def test_empty_text_filtered(self) -> None:
        payload = make_payload(
            make_messaging(sender="A", text=""),
            make_messaging(sender="B", text="   "),
            make_messaging(sender="C", text="kept", mid="m3"),
        )
        events = parse_events(payload_bytes(payload))
        assert [e.sender_id for e in events] == ["C"]

    def test_attachment_only_message_filtered(self) -> None:
        payload = make_payload(make_messaging(text=None, attachments=[{"type": "image"}]))
        assert parse_events(payload_bytes(payload)) == []

    def test_echo_filtered(self) -> None:
        payload = make_payload(make_messaging(text="our own reply", is_echo=True))
        assert parse_events(payload_bytes(payload)) == []

    def test_delivery_receipt_skipped(self) -> None:
        payload = make_payload(
            {
                "sender": {"id": "U1"},
                "recipient": {"id": "PAGE1"},
                "delivery": {"mids": ["m1"], "watermark": 1},
            }
        )
        assert parse_events(payload_bytes(payload)) == []

    def test_empty_sender_id_skipped(self) -> None:
        payload = make_payload(make_messaging(sender="", text="hi"))
        assert parse_events(payload_bytes(payload)) == []

    def test_missing_mid_allowed(self) -> None:
        payload = make_payload(make_messaging(mid=None, text="hi"))
        (event,) = parse_events(payload_bytes(payload))
        assert event.message_id is None

    def test_malformed_item_skipped(self) -> None:
        bad = make_messaging(sender="U1", text="hi", mid="m1")
        bad["sender"]["id"] = 123
        payload = make_payload(bad, make_messaging(sender="U2", text="still here", mid="m2"))
        events = parse_events(payload_bytes(payload))
        assert [e.sender_id for e in events] == ["U2"]

    def test_item_without_sender_skipped(self) -> None:
        body = (
            b'{"entry": [{"messaging": [{"message": {"text": "no sender"}},'
            b' {"sender": {"id": "U2"}, "message": {"mid": "m2", "text": "ok"}}]}]}'
        )
        assert [e.sender_id for e in parse_events(body)] == ["U2"]

    def test_malformed_entry_skipped(self) -> None:
        body = (
            b'{"entry": ["junk", {"messaging": "nope"},'
            b' {"messaging": [{"sender": {"id": "U3"}, "message": {"text": "ok"}}]}]}'
        )
        assert [e.sender_id for e in parse_events(body)] == ["U3"]


class TestParseErrors:
    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"",
            b"[]",
            b'{"object": "page"}',
            b'{"object": "page", "entry": {}}',
        ],
    )
    def test_malformed_body_raises(self, body: bytes) -> None:
        with pytest.raises(ParseError):
            parse_events(body)
