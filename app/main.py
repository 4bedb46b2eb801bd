"""
File: app/main.py

Project: Messenger Sentiment Responder

Purpose:
Application entry point.
Responsible only for:
- Building long-lived services once (store, classifier, gateway, orchestrator)
- FastAPI app creation and router registration
- Releasing the store at shutdown

Design principles:
- No business logic in this file
- Every service can be injected, so tests never touch the network
- Startup fails loudly on missing secrets or unusable storage

Run:
    uvicorn app.main:app_from_env --factory --port 3000
or
    python -m app.main
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from app.admin import admin_router
from app.config import Settings, load_settings
from app.health import router as health_router
from app.outbound.factory import build_send_gateway
from app.outbound.gateway import SendGateway
from app.outbound.retry import RetryPolicy, build_retry_policy
from app.services.response_orchestrator import ResponseOrchestrator
from app.services.response_store import ResponseStore
from app.services.sentiment_service import KeywordSentimentClassifier, SentimentClassifier
from app.services.transaction_service import (
    SimulatedTransactionStatusProvider,
    TransactionStatusProvider,
)
from app.verification import WebhookVerifier
from app.webhooks import router as webhooks_router

logger = logging.getLogger("main")


def create_app(
    settings: Settings,
    *,
    store: Optional[ResponseStore] = None,
    gateway: Optional[SendGateway] = None,
    classifier: Optional[SentimentClassifier] = None,
    transaction_provider: Optional[TransactionStatusProvider] = None,
    retry_policy: Optional[RetryPolicy] = None,
) -> FastAPI:
    logging.basicConfig(level=settings.log_level)

    store = store or ResponseStore.from_url(settings.database_url)
    orchestrator = ResponseOrchestrator(
        classifier=classifier or KeywordSentimentClassifier(),
        transaction_provider=transaction_provider or SimulatedTransactionStatusProvider(),
        gateway=gateway or build_send_gateway(settings),
        store=store,
        retry_policy=retry_policy or build_retry_policy(settings.outbound_max_attempts),
    )
    verifier = WebhookVerifier(
        verify_token=settings.verify_token,
        app_secret=settings.app_secret,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Responder ready (outbound mode: %s, signature check: %s)",
            settings.outbound_mode,
            "on" if verifier.checks_signature else "off",
        )
        yield
        store.close()
        logger.info("Response store closed")

    app = FastAPI(title="Messenger Sentiment Responder", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.orchestrator = orchestrator
    app.state.verifier = verifier

    # -------------------------------------------------------------------
    # Webhook routes (GET + POST /webhooks/messenger)
    # -------------------------------------------------------------------
    app.include_router(webhooks_router)

    # -------------------------------------------------------------------
    # Admin visibility (read-only)
    # -------------------------------------------------------------------
    app.include_router(admin_router)

    # -------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------
    app.include_router(health_router)

    return app


def app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    return create_app(load_settings())


def run() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
