"""
File: app/events.py

Project: Messenger Sentiment Responder

Purpose:
Decode a Messenger webhook body into normalised InboundEvents.

Expected payload:
{
    "object": "page",
    "entry": [
        {
            "id": "<page id>",
            "time": 1458692752478,
            "messaging": [
                {
                    "sender": {"id": "<PSID>"},
                    "recipient": {"id": "<page id>"},
                    "timestamp": 1458692752478,
                    "message": {"mid": "mid.1457764197618:41d102a3e1ae206a38", "text": "hello"}
                }
            ]
        }
    ]
}

Rules:
- Any number of entries, any number of messaging items per entry
- Items without a message (delivery / read receipts, postbacks) are skipped
- Echoes of the page's own messages are skipped
- Empty or whitespace-only text is skipped
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ValidationError

from app.errors import ParseError

logger = logging.getLogger("events")


class MessengerParty(BaseModel):
    id: str


class MessengerMessage(BaseModel):
    mid: Optional[str] = None
    text: Optional[str] = None
    is_echo: bool = False


class MessengerMessaging(BaseModel):
    sender: MessengerParty
    recipient: Optional[MessengerParty] = None
    timestamp: int = 0
    message: Optional[MessengerMessage] = None


class MessengerEntry(BaseModel):
    id: Optional[str] = None
    time: Optional[int] = None
    # Validated item by item in parse_events.
    messaging: List[Any] = []


class MessengerWebhookPayload(BaseModel):
    object: str = ""
    entry: List[Any]


@dataclass(frozen=True)
class InboundEvent:
    sender_id: str
    recipient_id: str
    message_text: str
    timestamp_millis: int
    message_id: Optional[str] = None


def parse_events(body: bytes) -> List[InboundEvent]:
    """
    Raises ParseError for malformed JSON or a body lacking the entry list.
    Entries or messaging items with the wrong shape are logged and skipped.
    Returns an empty list when nothing in the body needs a reply.
    """
    try:
        payload = MessengerWebhookPayload.model_validate_json(body)
    except ValidationError as exc:
        raise ParseError(f"invalid webhook payload: {exc.error_count()} error(s)") from exc

    events: List[InboundEvent] = []
    for raw_entry in payload.entry:
        entry = _validate(MessengerEntry, raw_entry, "entry")
        if entry is None:
            continue
        for raw_item in entry.messaging:
            item = _validate(MessengerMessaging, raw_item, "messaging item")
            if item is None:
                continue
            event = _to_event(item)
            if event is not None:
                events.append(event)
    return events


def _validate(model, raw: Any, what: str):
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        logger.warning("stage=parse: skipping malformed %s: %d error(s)", what, exc.error_count())
        return None


def _to_event(item: MessengerMessaging) -> InboundEvent | None:
    message = item.message
    if message is None:
        return None
    if message.is_echo:
        logger.debug("Skipping echo message %s", message.mid)
        return None
    if not item.sender.id:
        logger.warning("Skipping message %s without sender id", message.mid)
        return None

    text = message.text or ""
    if not text.strip():
        logger.info("Skipping empty message from %s", item.sender.id)
        return None

    return InboundEvent(
        sender_id=item.sender.id,
        recipient_id=item.recipient.id if item.recipient else "",
        message_text=text,
        timestamp_millis=item.timestamp,
        message_id=message.mid or None,
    )
