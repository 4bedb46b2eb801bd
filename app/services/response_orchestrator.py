"""
File: app/services/response_orchestrator.py

Project: Messenger Sentiment Responder

Purpose:
Run the reply pipeline for one InboundEvent:
1. recent-transaction signal for the sender
2. sentiment of the message text
3. reply policy
4. outbound send (with the injected retry policy)
5. persist the outcome

Design rules:
- Never deal with HTTP, FastAPI, or responses
- Send and persist are independent: a failed send is still recorded,
  a failed write never triggers a resend
- One instance is shared by all requests; it keeps no per-event state
- A message id that is already stored is not answered again
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from app.errors import (
    ClassificationError,
    DeliveryError,
    DuplicateResponseError,
    StoreError,
    TransactionStatusError,
)
from app.events import InboundEvent
from app.models import ResponseRecord
from app.outbound.gateway import OutboundSendReceipt, OutboundSendRequest, SendGateway
from app.outbound.retry import NoRetry, RetryPolicy
from app.services.reply_policy import ReplyDecision, decide_reply
from app.services.response_store import ResponseStore
from app.services.sentiment_service import SentimentClassifier, SentimentResult
from app.services.transaction_service import TransactionStatusProvider

logger = logging.getLogger("response_orchestrator")


@dataclass(frozen=True)
class ResponseOutcome:
    sender_id: str
    decision: Optional[ReplyDecision]
    delivered: bool
    record_id: Optional[int]
    duplicate: bool = False


class ResponseOrchestrator:
    def __init__(
        self,
        *,
        classifier: SentimentClassifier,
        transaction_provider: TransactionStatusProvider,
        gateway: SendGateway,
        store: ResponseStore,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._classifier = classifier
        self._transaction_provider = transaction_provider
        self._gateway = gateway
        self._store = store
        self._retry_policy = retry_policy or NoRetry()
        self._sleep = sleep

    def handle(self, event: InboundEvent) -> ResponseOutcome:
        """
        Never raises: each event in a webhook batch runs as its own background
        task, and an escaping error would cancel the tasks queued after it.
        """
        try:
            return self._handle(event)
        except Exception:
            logger.exception("stage=unexpected sender=%s: event abandoned", event.sender_id)
            return ResponseOutcome(
                sender_id=event.sender_id,
                decision=None,
                delivered=False,
                record_id=None,
            )

    def _handle(self, event: InboundEvent) -> ResponseOutcome:
        if self._already_answered(event):
            logger.info(
                "Skipping redelivered message %s from %s", event.message_id, event.sender_id
            )
            return ResponseOutcome(
                sender_id=event.sender_id,
                decision=None,
                delivered=False,
                record_id=None,
                duplicate=True,
            )

        recently_completed = self._transaction_status(event.sender_id)
        sentiment = self._classify(event)
        decision = decide_reply(sentiment.polarity, recently_completed)

        logger.info(
            "Reply decided sender=%s polarity=%s recent_transaction=%s",
            event.sender_id,
            sentiment.polarity.value,
            recently_completed,
        )

        delivered = self._deliver(event, decision) is not None
        record_id, duplicate = self._persist(event, decision)

        return ResponseOutcome(
            sender_id=event.sender_id,
            decision=decision,
            delivered=delivered,
            record_id=record_id,
            duplicate=duplicate,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------
    def _already_answered(self, event: InboundEvent) -> bool:
        if not event.message_id:
            return False
        try:
            return self._store.has_message(event.message_id)
        except Exception:
            logger.exception(
                "stage=dedupe sender=%s: lookup failed, processing anyway", event.sender_id
            )
            return False

    def _transaction_status(self, sender_id: str) -> bool:
        try:
            return bool(self._transaction_provider.recently_completed(sender_id))
        except TransactionStatusError:
            logger.warning(
                "stage=transaction_status sender=%s: signal unavailable, assuming none",
                sender_id,
                exc_info=True,
            )
            return False
        except Exception:
            logger.exception(
                "stage=transaction_status sender=%s: provider failed, assuming none", sender_id
            )
            return False

    def _classify(self, event: InboundEvent) -> SentimentResult:
        try:
            return self._classifier.classify(event.message_text)
        except ClassificationError:
            logger.warning(
                "stage=classify sender=%s: classifier unavailable, using neutral",
                event.sender_id,
                exc_info=True,
            )
            return SentimentResult.neutral()
        except Exception:
            logger.exception(
                "stage=classify sender=%s: classifier failed, using neutral", event.sender_id
            )
            return SentimentResult.neutral()

    def _deliver(self, event: InboundEvent, decision: ReplyDecision) -> Optional[OutboundSendReceipt]:
        req = OutboundSendRequest(
            recipient_id=event.sender_id,
            text=decision.reply_text,
            reply_to=event.message_id,
        )
        attempt = 0
        while True:
            attempt += 1
            try:
                return self._gateway.send_text(req)
            except DeliveryError as exc:
                delay = self._retry_policy.next_delay(attempt, exc)
                if delay is None:
                    logger.error(
                        "stage=deliver sender=%s attempt=%d reason=%s: giving up: %s",
                        event.sender_id,
                        attempt,
                        exc.reason,
                        exc,
                    )
                    return None
                logger.warning(
                    "stage=deliver sender=%s attempt=%d reason=%s: retrying in %.1fs: %s",
                    event.sender_id,
                    attempt,
                    exc.reason,
                    delay,
                    exc,
                )
                self._sleep(delay)
            except Exception:
                logger.exception(
                    "stage=deliver sender=%s attempt=%d: unexpected gateway failure",
                    event.sender_id,
                    attempt,
                )
                return None

    def _persist(self, event: InboundEvent, decision: ReplyDecision) -> Tuple[Optional[int], bool]:
        """Returns (record id or None, whether the message was already stored)."""
        record = ResponseRecord(
            sender_id=event.sender_id,
            response_text=decision.reply_text,
            completed_transaction=decision.completed_transaction_flag,
            message_id=event.message_id,
        )
        try:
            return self._store.append(record), False
        except DuplicateResponseError:
            logger.warning(
                "stage=persist sender=%s: message %s already stored",
                event.sender_id,
                event.message_id,
            )
            return None, True
        except StoreError:
            logger.exception("stage=persist sender=%s: failed to store response", event.sender_id)
            return None, False
        except Exception:
            logger.exception("stage=persist sender=%s: unexpected store failure", event.sender_id)
            return None, False
