"""
Messenger Sentiment Responder
Outbound delivery - DRY-RUN gateway

This gateway never sends anything.
It simply returns a receipt that indicates a simulated send.
"""

from __future__ import annotations

import logging

from app.errors import DeliveryError

from .gateway import SendGateway, OutboundSendRequest, OutboundSendReceipt, SendStatus

logger = logging.getLogger("outbound.dry_run")


class DryRunSendGateway(SendGateway):
    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        # Same validation as the real gateway, no I/O.
        if not req.text:
            raise DeliveryError("message can't be empty", reason="rejected", retryable=False)

        detail = (
            "DRY_RUN: outbound delivery simulated (not sent). "
            f"to={req.recipient_id} reply_to={req.reply_to}"
        )
        logger.info(detail)
        return OutboundSendReceipt.now(status=SendStatus.DRY_RUN, detail=detail, provider_message_id=None)
