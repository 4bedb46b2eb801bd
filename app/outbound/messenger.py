"""
File: app/outbound/messenger.py
Path: app/outbound/messenger.py

Project: Messenger Sentiment Responder

Purpose:
Messenger Send API gateway.
Supports:
- RESPONSE text messages to a page-scoped user id
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from app.errors import DeliveryError
from app.outbound.gateway import OutboundSendReceipt, OutboundSendRequest, SendGateway, SendStatus
from app.outbound.settings import MessengerSettings

logger = logging.getLogger("outbound.messenger")


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class MessengerSendGateway(SendGateway):
    def __init__(
        self,
        settings: MessengerSettings,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        if not req.text:
            raise DeliveryError("message can't be empty", reason="rejected", retryable=False)

        payload = {
            "recipient": {"id": req.recipient_id},
            "messaging_type": "RESPONSE",
            "message": {"text": req.text},
        }

        try:
            resp = self._session.post(
                self._settings.messages_url,
                params={"access_token": self._settings.access_token},
                json=payload,
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise DeliveryError(
                f"failed send request: {exc.__class__.__name__}",
                reason="network",
                retryable=True,
            ) from exc

        data = self._json_or_text(resp)

        if not 200 <= resp.status_code < 300:
            raise DeliveryError(
                f"send rejected with HTTP {resp.status_code}: {self._error_message(data)}",
                reason="rejected",
                retryable=_is_retryable_status(resp.status_code),
                status_code=resp.status_code,
            )

        provider_message_id = data.get("message_id")
        logger.info("Message sent to %s (mid=%s)", req.recipient_id, provider_message_id)
        return OutboundSendReceipt.now(
            status=SendStatus.SENT,
            detail=f"sent to={req.recipient_id} reply_to={req.reply_to}",
            provider_message_id=provider_message_id,
        )

    @staticmethod
    def _json_or_text(resp: requests.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            return {"raw_text": resp.text}
        return data if isinstance(data, dict) else {"raw": data}

    @staticmethod
    def _error_message(data: Dict[str, Any]) -> str:
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return str(data.get("raw_text", "unknown error"))[:200]
