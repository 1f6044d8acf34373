"""
CORS for the waiter app and admin dashboard.
Shared by the REST API and the WebSocket gateway.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import Settings, settings
from shared.infrastructure.correlation import REQUEST_ID_HEADER


# Local dev servers of the two clients
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",  # admin dashboard (Vite)
    "http://localhost:8081",  # waiter app (Expo web)
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8081",
]

# Everything the routers register, plus preflight
ALLOWED_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Authorization", "Content-Type", REQUEST_ID_HEADER]


def get_cors_origins(config: Settings) -> list[str]:
    """ALLOWED_ORIGINS when set (comma-separated), else the local dev servers."""
    origins = [o.strip() for o in config.allowed_origins.split(",") if o.strip()]
    return origins or DEFAULT_CORS_ORIGINS


def configure_cors(app: FastAPI, config: Settings | None = None) -> None:
    config = config or settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(config),
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=0 if config.environment == "development" else 600,
    )
