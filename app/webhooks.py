"""
File: app/webhooks.py
Path: app/webhooks.py

Project: Messenger Sentiment Responder

Purpose:
Messenger webhook endpoint.
- GET  /webhooks/messenger : subscription handshake
- POST /webhooks/messenger : message delivery

Notes:
- Any other method gets 405 from the router.
- POST is acknowledged with 200 as soon as the body is parsed; replies are
  produced in background tasks that run after the response is sent and are
  not cancelled if the platform drops the connection.
- Parse failures are logged and still acknowledged so the platform does not
  keep redelivering a body we can never handle.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse

from app.dependencies import get_orchestrator, get_verifier
from app.errors import ParseError, VerificationError
from app.events import parse_events
from app.services.response_orchestrator import ResponseOrchestrator
from app.verification import WebhookVerifier

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = logging.getLogger("webhooks")


@router.get("/messenger", response_class=PlainTextResponse)
def verify_webhook(
    request: Request,
    verifier: WebhookVerifier = Depends(get_verifier),
):
    try:
        challenge = verifier.verify_subscription(request.query_params)
    except VerificationError:
        raise HTTPException(status_code=403, detail="Webhook verification failed")

    logger.info("Webhook verified")
    return PlainTextResponse(challenge)


@router.post("/messenger")
async def messenger_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    verifier: WebhookVerifier = Depends(get_verifier),
    orchestrator: ResponseOrchestrator = Depends(get_orchestrator),
):
    body = await request.body()

    try:
        verifier.verify_signature(request.headers, body)
    except VerificationError:
        raise HTTPException(status_code=403, detail="Invalid signature")

    try:
        events = parse_events(body)
    except ParseError as exc:
        logger.warning("stage=parse: dropping webhook body: %s", exc)
        return Response(status_code=status.HTTP_200_OK)

    if not events:
        logger.info("No messages to answer in webhook body")
        return Response(status_code=status.HTTP_200_OK)

    for event in events:
        logger.info("Inbound message from %s (mid=%s)", event.sender_id, event.message_id)
        background_tasks.add_task(orchestrator.handle, event)

    return Response(status_code=status.HTTP_200_OK)
