"""
Health check endpoints
Used by the hosting platform + ops
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.dependencies import get_store
from app.services.response_store import ResponseStore

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger("health")


@router.get("")
def health_check():
    return {"status": "healthy"}


@router.get("/db")
def db_health_check(store: ResponseStore = Depends(get_store)):
    try:
        store.ping()
        return {"database": "healthy"}
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        return {"database": "unhealthy", "error": e.__class__.__name__}
