"""Shared test fixtures for the Messenger sentiment responder."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from app.config import Settings
from app.outbound.gateway import OutboundSendReceipt, OutboundSendRequest, SendStatus
from app.services.response_store import ResponseStore

VERIFY_TOKEN = "test-verify-token"


class RecordingGateway:
    """Send gateway that records requests and can be told to fail."""

    def __init__(self, failures: list[Exception] | None = None) -> None:
        self.sent: list[OutboundSendRequest] = []
        self.attempts = 0
        self._failures = list(failures or [])

    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        self.attempts += 1
        if self._failures:
            raise self._failures.pop(0)
        self.sent.append(req)
        return OutboundSendReceipt.now(status=SendStatus.SENT, detail="recorded")


def make_messaging(
    sender: str = "U1",
    text: str | None = "hello",
    mid: str | None = "mid.1",
    recipient: str = "PAGE1",
    timestamp: int = 1458692752478,
    **message_extra: Any,
) -> dict[str, Any]:
    message: dict[str, Any] = dict(message_extra)
    if mid is not None:
        message["mid"] = mid
    if text is not None:
        message["text"] = text
    return {
        "sender": {"id": sender},
        "recipient": {"id": recipient},
        "timestamp": timestamp,
        "message": message,
    }


def make_payload(*messaging: dict[str, Any], entries: int = 1) -> dict[str, Any]:
    return {
        "object": "page",
        "entry": [
            {"id": "PAGE1", "time": 1458692752478, "messaging": list(messaging)}
            for _ in range(entries)
        ],
    }


def payload_bytes(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        verify_token=VERIFY_TOKEN,
        page_access_token=None,
        database_url=f"sqlite:///{tmp_path / 'responses.db'}",
        outbound_mode="dry_run",
        outbound_max_attempts=1,
    )


@pytest.fixture
def store(settings: Settings):
    response_store = ResponseStore.from_url(settings.database_url)
    yield response_store
    response_store.close()


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()
