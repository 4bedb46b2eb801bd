"""
File: app/services/response_store.py

Project: Messenger Sentiment Responder

Purpose:
Durable, append-only log of replies sent (or attempted) per inbound message.

This is the ONLY place allowed to:
- write a ResponseRecord
- read ResponseRecords back

Design rules:
- One short-lived Session per operation; the engine is shared process-wide
- No application-level locking, the database serialises writers
- Query-side failures degrade to an empty result, never an exception
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.db import create_db_engine, create_session_factory, init_schema, ping_database
from app.errors import DuplicateResponseError, StoreError
from app.models import ResponseRecord

logger = logging.getLogger("response_store")

_LIST_BATCH_SIZE = 100


class ResponseStore:
    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker] = None) -> None:
        self._engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "ResponseStore":
        """
        Open the storage once at startup and make sure the table exists.
        Failures here are fatal to the process and are left to propagate.
        """
        engine = create_db_engine(database_url)
        init_schema(engine)
        return cls(engine)

    # -------------------------------------------------
    # Commands
    # -------------------------------------------------

    def append(self, record: ResponseRecord) -> int:
        """
        Insert a new record and return its surrogate id.

        Raises:
            DuplicateResponseError -> a record with the same message_id exists
            StoreError             -> any other storage failure
        """
        session = self._session_factory()
        try:
            session.add(record)
            session.commit()
            session.refresh(record)
            return record.id
        except IntegrityError as exc:
            session.rollback()
            if record.message_id is not None and self._duplicate_after_rollback(session, record.message_id):
                raise DuplicateResponseError(
                    f"response already stored for message {record.message_id}"
                ) from exc
            raise StoreError(f"failed to store response: {exc}") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"failed to store response: {exc}") from exc
        finally:
            session.close()

    # -------------------------------------------------
    # Queries
    # -------------------------------------------------

    def has_message(self, message_id: str) -> bool:
        session = self._session_factory()
        try:
            return self._message_exists(session, message_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to look up message {message_id}: {exc}") from exc
        finally:
            session.close()

    def list_all(self) -> Iterator[ResponseRecord]:
        """
        Lazily yield every stored record in insertion order.

        The returned iterator is single-use. A storage failure is logged and
        ends the iteration early instead of raising.
        """
        session = self._session_factory()
        try:
            query = (
                session.query(ResponseRecord)
                .order_by(ResponseRecord.id.asc())
                .yield_per(_LIST_BATCH_SIZE)
            )
            for record in query:
                yield record
        except SQLAlchemyError:
            logger.exception("Failed to read stored responses")
        finally:
            session.close()

    def ping(self) -> None:
        ping_database(self._engine)

    def close(self) -> None:
        self._engine.dispose()

    @classmethod
    def _duplicate_after_rollback(cls, session, message_id: str) -> bool:
        try:
            return cls._message_exists(session, message_id)
        except SQLAlchemyError:
            logger.warning("Could not confirm duplicate for message %s", message_id)
            return False

    @staticmethod
    def _message_exists(session, message_id: str) -> bool:
        return (
            session.query(ResponseRecord.id)
            .filter(ResponseRecord.message_id == message_id)
            .first()
            is not None
        )
