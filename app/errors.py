"""
File: app/errors.py

Project: Messenger Sentiment Responder

Purpose:
Error taxonomy for the response pipeline.

Design rules:
- Nothing raised after the webhook acknowledgement reaches the platform
- Every error carries enough context to be logged on its own
"""

from __future__ import annotations


class PipelineError(RuntimeError):
    pass


class VerificationError(PipelineError):
    """Bad or missing verify token / signature."""


class ParseError(PipelineError):
    """Webhook body is not JSON or does not have the Messenger shape."""


class ClassificationError(PipelineError):
    pass


class TransactionStatusError(PipelineError):
    pass


class DeliveryError(PipelineError):
    """
    Outbound send failed.

    reason is "network" (never reached the platform) or "rejected"
    (platform answered with a non-2xx status).
    """

    def __init__(
        self,
        message: str,
        *,
        reason: str,
        retryable: bool,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.retryable = retryable
        self.status_code = status_code


class StoreError(PipelineError):
    pass


class DuplicateResponseError(StoreError):
    """A response for this inbound message id is already stored."""
