"""
File: app/services/reply_policy.py

Project: Messenger Sentiment Responder

Purpose:
Pure mapping (polarity, recent transaction) -> canned reply.

Rules:
- Neutral sentiment takes the negative branch
- When no recent transaction is known the reply asks which product the
  sender bought, and the stored flag is forced to 1: the conversation is
  now about a purchase whether or not the signal saw one
"""

from __future__ import annotations

from dataclasses import dataclass

from app.services.sentiment_service import Polarity

REPLY_POSITIVE_WITH_TRANSACTION = (
    "Thank you for recently purchasing with us and I am glad to hear "
    "you had a positive experience with our product!"
)
REPLY_NEGATIVE_WITH_TRANSACTION = (
    "Thank you for recently purchasing with us and I am sorry to hear "
    "your experience wasn't the greatest with our product."
)
REPLY_POSITIVE_NO_TRANSACTION = (
    "Seems like there is no recent transaction tied with your account, "
    "what is the product you purchased which you had a positive experience with?"
)
REPLY_NEGATIVE_NO_TRANSACTION = (
    "Seems like there is no recent transaction tied with your account, "
    "what is the product you purchased which you had a negative experience with?"
)

# (is_positive, recently_completed) -> (reply, persisted completed_transaction)
_REPLY_TABLE = {
    (True, True): (REPLY_POSITIVE_WITH_TRANSACTION, True),
    (False, True): (REPLY_NEGATIVE_WITH_TRANSACTION, True),
    (True, False): (REPLY_POSITIVE_NO_TRANSACTION, True),
    (False, False): (REPLY_NEGATIVE_NO_TRANSACTION, True),
}


@dataclass(frozen=True)
class ReplyDecision:
    reply_text: str
    completed_transaction: bool

    @property
    def completed_transaction_flag(self) -> int:
        return 1 if self.completed_transaction else 0


def decide_reply(polarity: Polarity, recently_completed: bool) -> ReplyDecision:
    reply_text, completed = _REPLY_TABLE[
        (Polarity(polarity) is Polarity.POSITIVE, bool(recently_completed))
    ]
    return ReplyDecision(reply_text=reply_text, completed_transaction=completed)
