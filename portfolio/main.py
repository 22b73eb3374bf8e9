"""
Portfolio service

Content API, statically regenerated page payloads, admin login and
cached profile stats in one FastAPI app.

Run with:
    uvicorn portfolio.main:app
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request

from portfolio.admin.main import router as admin_router
from portfolio.articles.main import router as articles_router
from portfolio.pages.main import PageRenderer, router as pages_router
from portfolio.pages.regeneration import RegenerationCache
from portfolio.projects.main import router as projects_router
from portfolio.resume.main import router as resume_router
from portfolio.shared import config
from portfolio.shared.cors import setup_cors
from portfolio.shared.database import DocumentStore
from portfolio.shared.errors import install_exception_handlers
from portfolio.stats.cache import DatabaseCacheStore, StatsCache
from portfolio.stats.client import PROVIDERS
from portfolio.stats.main import router as stats_router

logger = logging.getLogger(__name__)

health_router = APIRouter(prefix="/api", tags=["health"])


@health_router.get("/health")
def health(request: Request):
    """Health check endpoint."""
    db_connected = request.app.state.store.check_connection()
    return {
        "status": "ok" if db_connected else "degraded",
        "service": "portfolio",
        "database": "connected" if db_connected else "disconnected",
    }


def create_app(
    store: Optional[DocumentStore] = None,
    stats_cache: Optional[StatsCache] = None,
    page_cache: Optional[RegenerationCache] = None,
    prerender: Optional[bool] = None,
) -> FastAPI:
    store = store or DocumentStore()
    stats_cache = stats_cache or StatsCache(DatabaseCacheStore(store), PROVIDERS)
    pages = PageRenderer(store, cache=page_cache)
    prerender = config.PRERENDER_ON_STARTUP if prerender is None else prerender

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if prerender:
            # fail-soft builders: an unreachable store yields empty pages, not a crash
            pages.prerender_all()
        yield
        pages.cache.shutdown()
        store.close()

    app = FastAPI(
        title="Portfolio API",
        version="1.0.0",
        description="Portfolio content, pages and profile stats",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.stats_cache = stats_cache
    app.state.pages = pages

    setup_cors(app)
    install_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(projects_router)
    app.include_router(articles_router)
    app.include_router(resume_router)
    app.include_router(stats_router)
    app.include_router(admin_router)
    app.include_router(pages_router)
    return app


logging.basicConfig(level=config.LOG_LEVEL)

app = create_app()
