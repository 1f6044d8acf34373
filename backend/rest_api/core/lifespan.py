"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.config.settings import Settings, settings
from shared.config.logging import setup_logging, rest_api_logger as logger
from rest_api.core.context import create_context


def check_production_settings(config: Settings) -> None:
    """Refuse to start a production deployment with insecure settings."""
    secret_errors = config.validate_production_secrets()
    if not secret_errors:
        return

    for error in secret_errors:
        logger.error("Configuration error", error=error)
    if config.environment == "production":
        raise RuntimeError(
            f"Production configuration errors: {'; '.join(secret_errors)}. "
            "Server will not start with insecure configuration."
        )
    logger.warning("Running with insecure defaults (acceptable for development only)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Builds the application context unless one was supplied to create_app(),
    initializes it before serving and closes it on shutdown. A supplied
    context is owned by the caller and is not closed here. Logging and the
    production checks use the settings of whichever context is served.
    """
    owns_context = getattr(app.state, "context", None) is None
    context = create_context(settings) if owns_context else app.state.context

    setup_logging(context.settings)
    try:
        check_production_settings(context.settings)
    except RuntimeError:
        if owns_context:
            context.close()
        raise

    logger.info(
        "Starting REST API",
        port=context.settings.rest_api_port,
        env=context.settings.environment,
    )
    app.state.context = context
    context.init()

    yield

    logger.info("Shutting down REST API")
    if owns_context:
        context.close()
        app.state.context = None
