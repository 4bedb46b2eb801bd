"""
Messenger Sentiment Responder
Outbound delivery abstraction

This module defines a stable SendGateway interface and strongly-typed
request/receipt objects for outbound delivery.

Guardrails:
- Gateways raise DeliveryError on failure; retrying is the caller's decision
- Empty text is never sent
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol, Optional


class SendStatus(str, Enum):
    DRY_RUN = "dry_run"
    SENT = "sent"


@dataclass(frozen=True)
class OutboundSendRequest:
    """
    One reply to deliver.

    - recipient_id is the sender's page-scoped id (PSID)
    - reply_to is the inbound message id, for log correlation only
    """
    recipient_id: str
    text: str
    reply_to: Optional[str] = None


@dataclass(frozen=True)
class OutboundSendReceipt:
    """
    Result of a successful (or simulated) delivery.
    """
    status: SendStatus
    provider_message_id: Optional[str]
    detail: str
    created_at_utc: datetime

    @staticmethod
    def now(status: SendStatus, detail: str, provider_message_id: Optional[str] = None) -> "OutboundSendReceipt":
        return OutboundSendReceipt(
            status=status,
            provider_message_id=provider_message_id,
            detail=detail,
            created_at_utc=datetime.now(timezone.utc),
        )


class SendGateway(Protocol):
    """
    Abstract gateway for outbound delivery.
    """
    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        """
        Deliver a text message (or simulate it, depending on gateway).
        Raises DeliveryError when the message was not delivered.
        """
        ...
