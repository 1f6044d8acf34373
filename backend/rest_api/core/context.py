"""
Process-wide application context.

Everything that used to be created at import time (engine, session
factory, broadcast publisher, image storage) is built here, explicitly,
once per process:

    context = create_context(settings)
    context.init()        # before serving
    ...
    context.close()       # on shutdown

The REST app keeps it on app.state.context; FastAPI dependencies read
their collaborators from there.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from shared.config.settings import Settings
from shared.config.logging import rest_api_logger as logger
from shared.infrastructure.db import build_engine, build_session_factory
from shared.infrastructure.events import EventPublisher, create_publisher
from shared.infrastructure.storage import ImageStorage, create_storage
from rest_api.models import Base


@dataclass
class AppContext:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    publisher: EventPublisher
    storage: ImageStorage

    def init(self) -> None:
        """Create missing tables and check the database answers."""
        Base.metadata.create_all(bind=self.engine)
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database tables created/verified")

    def close(self) -> None:
        """Release publisher connections and the engine pool."""
        self.publisher.close()
        self.engine.dispose()
        logger.info("Application context closed")


def create_context(
    settings: Settings,
    publisher: EventPublisher | None = None,
    storage: ImageStorage | None = None,
) -> AppContext:
    """
    Build the context from settings.

    publisher and storage may be injected (tests, CLI); otherwise they
    are chosen by BROADCAST_ENABLED and STORAGE_BACKEND.
    """
    engine = build_engine(settings.database_url, echo=False)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        publisher=publisher or create_publisher(settings),
        storage=storage or create_storage(settings),
    )


# =============================================================================
# FastAPI dependencies
# =============================================================================


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_publisher(request: Request) -> EventPublisher:
    return request.app.state.context.publisher


def get_storage(request: Request) -> ImageStorage:
    return request.app.state.context.storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.context.settings
