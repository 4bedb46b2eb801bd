"""
File: app/admin/routes.py

Project: Messenger Sentiment Responder

Purpose:
Admin visibility endpoints.

Endpoints:
- GET /admin/responses

Design rules:
- Read-only
- No outbound sending
"""

from fastapi import APIRouter, Depends

from app.dependencies import get_store
from app.services.response_store import ResponseStore

router = APIRouter(prefix="/admin", tags=["admin"])


# -------------------------------------------------------------------
# Stored responses (insertion order)
# -------------------------------------------------------------------
@router.get("/responses")
def list_responses(store: ResponseStore = Depends(get_store)):
    return [record.to_dict() for record in store.list_all()]
