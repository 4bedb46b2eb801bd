"""
FastAPI dependencies.

Long-lived services are built once in app.main.create_app and hung on
app.state; routes reach them through these accessors.
"""

from fastapi import Request

from app.services.response_orchestrator import ResponseOrchestrator
from app.services.response_store import ResponseStore
from app.verification import WebhookVerifier


def get_verifier(request: Request) -> WebhookVerifier:
    return request.app.state.verifier


def get_orchestrator(request: Request) -> ResponseOrchestrator:
    return request.app.state.orchestrator


def get_store(request: Request) -> ResponseStore:
    return request.app.state.store
