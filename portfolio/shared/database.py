"""
Document store connector

Wraps one SQLAlchemy engine per ``DocumentStore`` object. The store is
created unconnected, opened lazily by ``connect()`` and handed to the
request layer through ``app.state.store``.

Models inherit from ``Base``; tables are created on first connect.
"""

import logging
import threading
from concurrent.futures import Future
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import JSON, create_engine, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio.shared import config
from portfolio.shared.errors import StoreUnavailable

logger = logging.getLogger(__name__)

# Base class for ORM models
Base = declarative_base()

# List and dict fields; JSONB on PostgreSQL
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class DocumentStore:
    """
    Long-lived connection pool for the content collections.

    ``connect()`` is idempotent: the first caller opens the engine and
    every concurrent caller waits for that same attempt. A failed attempt
    is not remembered, so the next request retries.
    """

    def __init__(self, url: Optional[str] = None, **engine_options):
        self.url = url or config.DATABASE_URL
        self.engine_options = engine_options
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._pending: Optional[Future] = None
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _engine_kwargs(self) -> dict:
        options = {"pool_pre_ping": True}
        if self.url.startswith("sqlite"):
            options["connect_args"] = {
                "check_same_thread": False,
                "timeout": config.DB_CONNECT_TIMEOUT,
            }
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise each checkout sees an empty database
                options["poolclass"] = StaticPool
        else:
            options["pool_timeout"] = config.DB_POOL_TIMEOUT
            if self.url.startswith("postgresql"):
                options["connect_args"] = {"connect_timeout": config.DB_CONNECT_TIMEOUT}
        options.update(self.engine_options)
        return options

    def _open_engine(self) -> Engine:
        engine = create_engine(self.url, **self._engine_kwargs())
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError:
            engine.dispose()
            raise
        return engine

    def connect(self) -> Engine:
        """Open the engine once and return it."""
        if self._engine is not None:
            return self._engine

        with self._lock:
            if self._engine is not None:
                return self._engine
            pending = self._pending
            owner = pending is None
            if owner:
                pending = self._pending = Future()

        if not owner:
            return pending.result()

        try:
            engine = self._open_engine()
        except Exception as e:
            # includes driver ImportErrors raised by create_engine
            logger.error(f"Could not connect to document store: {type(e).__name__}: {e}")
            error = StoreUnavailable("Document store unavailable")
            self._fail_pending(pending, error)
            raise error from e
        except BaseException as e:
            self._fail_pending(pending, e)
            raise

        with self._lock:
            self._engine = engine
            self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
            self._pending = None
        logger.info("Connected to document store")
        pending.set_result(engine)
        return engine

    def _fail_pending(self, pending: Future, error: BaseException) -> None:
        with self._lock:
            self._pending = None
        pending.set_exception(error)

    def close(self) -> None:
        with self._lock:
            engine, self._engine = self._engine, None
            self._session_factory = None
        if engine is not None:
            engine.dispose()
            logger.info("Document store connection closed")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Yield an ORM session bound to this store.

        Usage:
            with store.session() as db:
                db.query(Project).all()
        """
        self.connect()
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    def check_connection(self) -> bool:
        """
        Test database connectivity
        Returns True if connection successful, False otherwise
        """
        try:
            engine = self.connect()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except (StoreUnavailable, SQLAlchemyError):
            return False


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency injection for database sessions
    Usage in FastAPI endpoints:

    @router.get("/endpoint")
    def endpoint(db: Session = Depends(get_db)):
        # use db here
        pass
    """
    with get_store(request).session() as db:
        yield db
