"""
File: app/outbound/factory.py
Path: app/outbound/factory.py

Project: Messenger Sentiment Responder

Purpose:
- Provide a single place to construct the outbound gateway
- Built once at startup and shared by every request

Design rules:
- No business logic here
- Only construction / wiring
"""

from __future__ import annotations

from typing import Optional

import requests

from app.config import Settings
from app.outbound.dry_run import DryRunSendGateway
from app.outbound.gateway import SendGateway
from app.outbound.messenger import MessengerSendGateway
from app.outbound.settings import load_messenger_settings


def build_send_gateway(settings: Settings, session: Optional[requests.Session] = None) -> SendGateway:
    if settings.outbound_mode == "dry_run":
        return DryRunSendGateway()
    if settings.outbound_mode == "messenger":
        return MessengerSendGateway(settings=load_messenger_settings(settings), session=session)
    raise RuntimeError(f"Unknown OUTBOUND_MODE: {settings.outbound_mode}")
