"""
app/outbound/settings.py
Messenger Sentiment Responder
Outbound Settings

Purpose:
- Outbound (Messenger Send API) configuration, derived from app Settings.
- Keep secrets out of code via environment variables.

Notes:
- PAGE_ACCESS_TOKEN is required for real sends
- GRAPH_API_BASE_URL selects the Graph API version
"""

from __future__ import annotations

from dataclasses import dataclass

from app.config import Settings


@dataclass(frozen=True)
class MessengerSettings:
    base_url: str
    access_token: str
    timeout_seconds: int = 30

    @property
    def messages_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/me/messages"


def load_messenger_settings(settings: Settings) -> MessengerSettings:
    if not settings.page_access_token:
        raise RuntimeError(
            "Missing required environment variable: PAGE_ACCESS_TOKEN. "
            "Set it or run with OUTBOUND_MODE=dry_run."
        )
    return MessengerSettings(
        base_url=settings.graph_api_base_url,
        access_token=settings.page_access_token,
        timeout_seconds=settings.outbound_timeout_seconds,
    )
