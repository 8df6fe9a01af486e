"""
Database configuration and session management
Builds the engine, hands out request-scoped sessions and creates tables
"""

import logging
from contextlib import contextmanager
from typing import Generator

import sentry_sdk
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from quizly.core.config import settings

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL

    SQLite gets foreign keys switched on and explicit BEGIN handling so that
    ON DELETE CASCADE and SAVEPOINTs behave like they do on PostgreSQL.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": settings.DEBUG}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        new_engine = create_engine(database_url, **kwargs)
        _configure_sqlite(new_engine)
        return new_engine

    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        echo=settings.DEBUG,
    )


def _configure_sqlite(sqlite_engine: Engine) -> None:
    @event.listens_for(sqlite_engine, "connect")
    def receive_connect(dbapi_conn, connection_record):
        # let SQLAlchemy emit BEGIN itself
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("SQLite connection opened with foreign keys enabled")

    @event.listens_for(sqlite_engine, "begin")
    def receive_begin(conn):
        conn.exec_driver_sql("BEGIN")


engine = build_engine(settings.get_database_url())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(bind: Engine = None) -> None:
    """Create tables if they don't exist and check the connection"""
    bind = bind or engine
    try:
        # Import all models here to ensure they're registered
        from quizly import models  # noqa

        Base.metadata.create_all(bind=bind)
        logger.info("Database tables created successfully")

        with bind.connect() as conn:
            if conn.execute(text("SELECT 1")).scalar() == 1:
                logger.info("Database connection successful")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        if settings.SENTRY_DSN:
            sentry_sdk.capture_exception(e)
        raise


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session
    Uncommitted work is rolled back when the request fails
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database error occurred: {e}")
        db.rollback()
        if settings.SENTRY_DSN:
            sentry_sdk.capture_exception(e)
        raise
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database session
    Use this for scripts or other non-request contexts
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Database session error: {e}")
        if settings.SENTRY_DSN:
            sentry_sdk.capture_exception(e)
        raise
    finally:
        session.close()


def check_connection(db: Session) -> bool:
    try:
        return db.execute(text("SELECT 1")).scalar() == 1
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return False
