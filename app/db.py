"""
Messenger Sentiment Responder
Database module (single-file)

Provides:
- SQLAlchemy engine construction (process-wide, opened once)
- sessionmaker bound to that engine
- schema creation and a connectivity probe

Concurrent writers are serialised by the database engine itself
(SQLite file locking / server-side transactions), never by an
application lock.
"""

from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.models import Base

# Seconds a SQLite writer waits on the file lock before giving up.
SQLITE_BUSY_TIMEOUT = 30


def create_db_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={
                "check_same_thread": False,
                "timeout": SQLITE_BUSY_TIMEOUT,
            },
        )
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )


def init_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def ping_database(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
