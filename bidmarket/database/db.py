"""Engine and session factory for the marketplace database."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from bidmarket.core.config import get_config

logger = logging.getLogger(__name__)

config = get_config()
DATABASE_URL = config.DATABASE_URL

Base = declarative_base()

# Bound on first use so importing the models never opens a connection.
engine: Engine | None = None
SessionLocal: sessionmaker | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """SQLite gets FK enforcement and cross-thread use; servers get a sized pool."""
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(database_url, echo=echo, connect_args={"check_same_thread": False})
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=10,
        max_overflow=20,
    )


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


def get_engine() -> Engine:
    global engine, SessionLocal
    if engine is None:
        engine = build_engine(DATABASE_URL, echo=config.DEBUG and config.LOG_LEVEL == "DEBUG")
        SessionLocal = build_session_factory(engine)
    return engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return SessionLocal


def init_db(bind: Engine | None = None) -> None:
    """Create all tables on the given (or default) engine."""
    # Import registers the mapped classes on Base.metadata.
    from bidmarket.database import models  # noqa: F401

    Base.metadata.create_all(bind=bind or get_engine())


def verify_database_connection(bind: Engine | None = None) -> bool:
    try:
        with (bind or get_engine()).connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception(
            "database.connection_failed",
            extra={"event": "database.connection_failed", "database_url_scheme": DATABASE_URL.split("://", 1)[0]},
        )
        return False
    return True
