"""
Environment configuration

All settings are read from environment variables once at import time.
Read them through the module (``config.SESSION_SECRET``) rather than
importing the names so they can be overridden in tests.
"""

import os


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL", "postgresql+psycopg2://portfolio:changeme@db:5432/portfolio"
)
DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "10"))  # seconds
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))  # seconds

# Site
FRONTEND_URL = os.getenv("FRONTEND_URL")
SITE_URL = os.getenv("SITE_URL", "http://localhost:3000").rstrip("/")

# Admin authentication
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
SESSION_SECRET = os.getenv("SESSION_SECRET")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(7 * 24 * 3600)))
INTERNAL_API_KEY = os.getenv("INTERNAL_API_KEY")

# Third-party stats
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
STATS_CACHE_TTL = int(os.getenv("STATS_CACHE_TTL", "3600"))  # 1 hour
STATS_HTTP_TIMEOUT = float(os.getenv("STATS_HTTP_TIMEOUT", "10"))
STATS_SINGLE_FLIGHT = _get_bool("STATS_SINGLE_FLIGHT", True)

# Static regeneration
PAGE_REVALIDATE_SECONDS = int(os.getenv("PAGE_REVALIDATE_SECONDS", "60"))
PRERENDER_ON_STARTUP = _get_bool("PRERENDER_ON_STARTUP", True)


def is_production() -> bool:
    return ENVIRONMENT == "production"
