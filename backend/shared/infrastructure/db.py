"""
Database configuration and session management.
Uses SQLAlchemy 2.0 with synchronous sessions.

The engine and session factory are built explicitly by the application
context (rest_api.core.context) instead of at import time, so tests and
the CLI can point them at any database URL.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from shared.config.logging import get_logger
from shared.utils.exceptions import ConflictError, DatabaseError, ValidationError

logger = get_logger(__name__)


def _calculate_pool_size() -> int:
    """
    Calculate pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at 20.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite URLs (tests, local tooling) share a single connection so an
    in-memory database survives across sessions; every other backend gets
    a sized connection pool with timeouts.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
        # order_item rows rely on ON DELETE CASCADE
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=_calculate_pool_size(),
        max_overflow=15,
        pool_timeout=30,  # Wait max 30s for connection from pool
        pool_recycle=1800,  # Recycle connections after 30 minutes
        connect_args={"connect_timeout": 10},
        echo=echo,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to the engine."""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/tables")
        def list_tables(db: Session = Depends(get_db)):
            ...

    The session comes from the application context and is closed after
    the request completes.
    """
    db = request.app.state.context.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI (CLI, health checks).

    Usage:
        with session_scope(context.session_factory) as db:
            db.scalars(select(Account)).all()
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


# SQLSTATE for unique_violation in PostgreSQL
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the integrity error comes from a unique constraint or index."""
    orig = error.orig
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


def safe_commit(db: Session, operation: str = "commit changes") -> None:
    """
    Commit with automatic rollback on failure.

    Unique-constraint violations become ConflictError. NOT NULL, CHECK and
    foreign-key violations become ValidationError; any other driver
    failure becomes DatabaseError. No retries are attempted.

    Usage:
        from shared.infrastructure.db import safe_commit
        safe_commit(db, "create table")
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError(
                "Resource conflicts with an existing record",
                operation=operation,
                error=str(e.orig),
            )
        raise ValidationError(
            "Record violates a data constraint",
            operation=operation,
            error=str(e.orig),
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Commit failed", operation=operation, exc_info=True)
        raise DatabaseError(operation, error=str(e))
