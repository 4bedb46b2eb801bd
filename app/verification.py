"""
File: app/verification.py

Project: Messenger Sentiment Responder

Purpose:
Webhook authenticity checks.
- GET subscription handshake (hub.verify_token / hub.challenge)
- Optional X-Hub-Signature-256 check on POST bodies when an app secret is configured

Design rules:
- Constant-time comparisons only
- Never log or echo the configured secret
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Mapping, Optional

from app.errors import VerificationError

logger = logging.getLogger("verification")

SIGNATURE_HEADER = "x-hub-signature-256"


def _redact(value: str) -> str:
    if len(value) <= 2:
        return "*" * len(value)
    return f"{value[:2]}***"


class WebhookVerifier:
    def __init__(self, verify_token: str, app_secret: Optional[str] = None) -> None:
        if not verify_token:
            raise ValueError("verify_token must not be empty")
        self._verify_token = verify_token
        self._app_secret = app_secret

    def verify_subscription(self, params: Mapping[str, str]) -> str:
        """
        Return the challenge to echo when hub.verify_token matches.
        Raises VerificationError otherwise.
        """
        token = params.get("hub.verify_token")
        if token is None:
            logger.warning("Webhook verification without hub.verify_token")
            raise VerificationError("missing verify token")

        if not hmac.compare_digest(token.encode(), self._verify_token.encode()):
            logger.warning("Invalid verification token: %s", _redact(token))
            raise VerificationError("invalid verify token")

        return params.get("hub.challenge", "")

    @property
    def checks_signature(self) -> bool:
        return bool(self._app_secret)

    def verify_signature(self, headers: Mapping[str, str], body: bytes) -> None:
        """
        No-op when no app secret is configured.
        Raises VerificationError on a missing or wrong signature.
        """
        if not self._app_secret:
            return

        signature = headers.get(SIGNATURE_HEADER, "")
        if not signature.startswith("sha256="):
            logger.warning("Webhook body without sha256 signature")
            raise VerificationError("missing signature")

        expected = hmac.new(self._app_secret.encode(), body, hashlib.sha256).hexdigest()
        if not hmac.compare_digest(signature[7:], expected):
            logger.warning("Webhook body with invalid signature")
            raise VerificationError("invalid signature")
