"""Centralized CORS configuration for the portfolio API."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio.shared import config

# Development origins (dev environment only)
DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
]


def get_allowed_origins() -> list[str]:
    """Allowed CORS origins for the current environment."""
    origins = [config.SITE_URL]

    if config.FRONTEND_URL:
        clean_url = config.FRONTEND_URL.rstrip("/")
        if clean_url not in origins:
            origins.append(clean_url)

    if not config.is_production():
        origins.extend(origin for origin in DEV_ORIGINS if origin not in origins)

    return origins


def setup_cors(app: FastAPI) -> None:
    """Add the CORS middleware to a FastAPI app."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
