"""
CORS configuration.

The floor plan runs in browsers on the back-office PC and on waiters'
tablets. Production allows only ALLOWED_ORIGINS; development also accepts
any host on the private LAN so tablets can reach a laptop-hosted API.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings


DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

# 10.x.x.x, 172.16-31.x.x and 192.168.x.x on any port
PRIVATE_LAN_ORIGIN = (
    r"^http://("
    r"10\.\d{1,3}\.\d{1,3}\.\d{1,3}"
    r"|172\.(1[6-9]|2\d|3[01])\.\d{1,3}\.\d{1,3}"
    r"|192\.168\.\d{1,3}\.\d{1,3}"
    r")(:\d+)?$"
)


def get_cors_origins() -> list[str]:
    """Explicit origins: ALLOWED_ORIGINS (comma-separated) or the dev defaults."""
    configured = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    return configured or DEV_ORIGINS


def configure_cors(app: FastAPI) -> None:
    development = settings.environment == "development"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_origin_regex=PRIVATE_LAN_ORIGIN if development else None,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        # Preflight caching off while iterating locally
        max_age=0 if development else 600,
    )
