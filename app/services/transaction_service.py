"""
File: app/services/transaction_service.py

Project: Messenger Sentiment Responder

Purpose:
"Did this sender recently complete a transaction?" capability.

Notes:
- No order system is wired in yet; the simulated provider flips a coin,
  so two deliveries of the same event may see different answers.
"""

from __future__ import annotations

import random
from typing import Optional, Protocol


class TransactionStatusProvider(Protocol):
    def recently_completed(self, sender_id: str) -> bool:
        """
        Raises TransactionStatusError when the signal cannot be obtained.
        """
        ...


class SimulatedTransactionStatusProvider:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def recently_completed(self, sender_id: str) -> bool:
        return self._rng.random() >= 0.5


class StaticTransactionStatusProvider:
    """Always answers the same; handy in tests where the reply branch must be fixed."""

    def __init__(self, completed: bool) -> None:
        self._completed = completed

    def recently_completed(self, sender_id: str) -> bool:
        return self._completed
