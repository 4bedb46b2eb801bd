"""
app/config.py
Application configuration
Environment-driven, secrets are never defaulted
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

OUTBOUND_MODES = ("messenger", "dry_run")


def _require_env(env: Mapping[str, str], name: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        raise RuntimeError(
            f"Missing required environment variable: {name}. "
            f"Set it in your .env / shell before running."
        )
    return value


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    verify_token: str
    page_access_token: Optional[str]
    graph_api_base_url: str = "https://graph.facebook.com/v12.0"
    app_secret: Optional[str] = None
    database_url: str = "sqlite:///responses.db"
    port: int = 3000
    outbound_mode: str = "messenger"
    outbound_max_attempts: int = 3
    outbound_timeout_seconds: int = 30
    log_level: str = "INFO"


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Raises RuntimeError when a required secret is missing so the
    process never starts half-configured.
    """
    env = os.environ if env is None else env

    outbound_mode = env.get("OUTBOUND_MODE", "messenger").strip().lower() or "messenger"
    if outbound_mode not in OUTBOUND_MODES:
        raise RuntimeError(
            f"OUTBOUND_MODE must be one of {', '.join(OUTBOUND_MODES)}, got {outbound_mode!r}"
        )

    page_access_token = None
    if outbound_mode == "messenger":
        page_access_token = _require_env(env, "PAGE_ACCESS_TOKEN")

    max_attempts = _int_env(env, "OUTBOUND_MAX_ATTEMPTS", 3)
    if max_attempts < 1:
        raise RuntimeError("OUTBOUND_MAX_ATTEMPTS must be at least 1")

    return Settings(
        verify_token=_require_env(env, "VERIFY_TOKEN"),
        page_access_token=page_access_token,
        graph_api_base_url=env.get("GRAPH_API_BASE_URL", "").strip()
        or "https://graph.facebook.com/v12.0",
        app_secret=env.get("APP_SECRET", "").strip() or None,
        database_url=env.get("DATABASE_URL", "").strip() or "sqlite:///responses.db",
        port=_int_env(env, "PORT", 3000),
        outbound_mode=outbound_mode,
        outbound_max_attempts=max_attempts,
        outbound_timeout_seconds=_int_env(env, "OUTBOUND_TIMEOUT_SECONDS", 30),
        log_level=env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
