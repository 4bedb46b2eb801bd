"""
File: app/models.py

Project: Messenger Sentiment Responder

Purpose:
SQLAlchemy ORM model for the append-only response log.

Design rules:
- One row per processed inbound message
- No updates, no deletes
- completed_transaction is an integer flag (0/1), never a sentiment score
- message_id (Messenger mid) is unique so a redelivered event cannot be stored twice
"""

from sqlalchemy import (
    Column,
    Integer,
    Text,
    DateTime,
    CheckConstraint,
    func,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# ---------------------------------------------------------------------
# Response record
# ---------------------------------------------------------------------
class ResponseRecord(Base):
    __tablename__ = "responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(Text, nullable=False)
    response_text = Column(Text, nullable=False)
    completed_transaction = Column(Integer, nullable=False)
    message_id = Column(Text, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "completed_transaction IN (0, 1)",
            name="ck_responses_completed_transaction",
        ),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "response_text": self.response_text,
            "completed_transaction": self.completed_transaction,
            "message_id": self.message_id,
            "created_at": self.created_at,
        }
