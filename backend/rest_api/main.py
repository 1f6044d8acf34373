"""
REST API main application.
Entry point for the FastAPI REST server.

Usage:
    uvicorn rest_api.main:app --port 3000

    # Tests and tooling build their own app around a prepared context
    app = create_app(create_context(settings, publisher=recorder))
"""

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from rest_api.core.context import AppContext
from rest_api.core.cors import configure_cors
from rest_api.core.errors import register_exception_handlers
from rest_api.core.lifespan import lifespan
from rest_api.core.middlewares import register_middlewares
from rest_api.routers.accounts import router as accounts_router
from rest_api.routers.auth import router as auth_router
from rest_api.routers.catalog import router as catalog_router
from rest_api.routers.orders import router as orders_router
from rest_api.routers.public import health_router
from rest_api.routers.tables import router as tables_router
from shared.config.settings import settings
from shared.security.rate_limit import limiter


def _mount_media(app: FastAPI, context: AppContext | None) -> None:
    """Serve locally stored product images at MEDIA_URL_PREFIX."""
    app_settings = context.settings if context else settings
    if app_settings.storage_backend.lower() != "local":
        return

    directory = app_settings.media_dir
    if context is not None:
        directory = getattr(context.storage, "base_dir", directory)

    app.mount(
        app_settings.media_url_prefix,
        StaticFiles(directory=directory, check_dir=False),
        name="media",
    )


def create_app(context: AppContext | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    When no context is given, the lifespan builds one from settings on
    startup and closes it on shutdown.
    """
    app = FastAPI(
        title="Comanda REST API",
        description="Restaurant order-taking API for waiters and administrators",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.context = context

    # Rate limiting
    app.state.limiter = limiter

    register_exception_handlers(app)
    register_middlewares(app)
    configure_cors(app, context.settings if context else settings)

    # =========================================================================
    # Include Routers
    # =========================================================================

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(accounts_router)
    app.include_router(catalog_router)
    app.include_router(tables_router)
    app.include_router(orders_router)

    _mount_media(app, context)
    return app


app = create_app()


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rest_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=settings.debug,
    )
