"""
Content read layer

Turns stored Project, Article and Resume rows into the external document
shape used by the JSON API and the page builders:

- internal timestamps (created_at, updated_at) are stripped
- ids are plain strings
- optional fields that are absent are left out, never emitted as null
- keys are camelCase

The ``list_*`` / ``get_*`` functions open their own session on the store
and fail soft: a store error is logged and turned into ``[]`` or ``None``.
The ``fetch_*`` variants take a session and let errors propagate, for
callers that report failures themselves.
"""
import logging
from typing import Optional

from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio.articles.models import Article
from portfolio.projects.models import Project
from portfolio.resume.models import RESUME_ID, Resume
from portfolio.shared.database import DocumentStore
from portfolio.shared.errors import StoreUnavailable

logger = logging.getLogger(__name__)

INTERNAL_FIELDS = frozenset({"created_at", "updated_at"})

# Descending sort keys each caller may choose from
PROJECT_SORT_KEYS = {
    "title": Project.title,
    "slug": Project.slug,
    "created_at": Project.created_at,
}
ARTICLE_SORT_KEYS = {
    "slug": Article.slug,
    "date": Article.date,
    "title": Article.title,
    "created_at": Article.created_at,
}


def normalize(document: dict, internal_fields=INTERNAL_FIELDS) -> dict:
    """Externalize a stored document (see module docstring)."""
    normalized = {}
    for key, value in document.items():
        if key in internal_fields or value is None:
            continue
        if key == "id":
            value = str(value)
        normalized[to_camel(key)] = value
    return normalized


def _sort_column(sort_keys: dict, sort_by: str):
    try:
        return sort_keys[sort_by]
    except KeyError:
        raise ValueError(
            f"Unsupported sort key '{sort_by}'. Choose one of: {', '.join(sort_keys)}"
        ) from None


def fetch_projects(db: Session, sort_by: str = "title") -> list[dict]:
    column = _sort_column(PROJECT_SORT_KEYS, sort_by)
    projects = db.query(Project).order_by(column.desc()).all()
    return [normalize(p.to_dict()) for p in projects]


def fetch_articles(db: Session, sort_by: str = "slug") -> list[dict]:
    column = _sort_column(ARTICLE_SORT_KEYS, sort_by)
    articles = db.query(Article).order_by(column.desc()).all()
    return [normalize(a.to_dict()) for a in articles]


def fetch_resume(db: Session) -> Optional[dict]:
    resume = db.query(Resume).filter(Resume.id == RESUME_ID).first()
    if not resume:
        return None
    return normalize(resume.to_dict(), internal_fields=INTERNAL_FIELDS | {"id"})


def list_projects(store: DocumentStore, sort_by: str = "title") -> list[dict]:
    """
    All projects, sorted descending by ``sort_by``.

    The default of ``title`` is what the public list endpoint has always
    returned; page builders ask for ``created_at`` (newest first).
    """
    _sort_column(PROJECT_SORT_KEYS, sort_by)
    try:
        with store.session() as db:
            return fetch_projects(db, sort_by)
    except (StoreUnavailable, SQLAlchemyError) as e:
        logger.error(f"Failed to list projects: {e}")
        return []


def list_articles(store: DocumentStore, sort_by: str = "slug") -> list[dict]:
    """
    All articles, sorted descending by ``sort_by``.

    The list endpoint sorts by ``slug``; page builders sort by ``date``.
    """
    _sort_column(ARTICLE_SORT_KEYS, sort_by)
    try:
        with store.session() as db:
            return fetch_articles(db, sort_by)
    except (StoreUnavailable, SQLAlchemyError) as e:
        logger.error(f"Failed to list articles: {e}")
        return []


def get_project_by_slug(store: DocumentStore, slug: str) -> Optional[dict]:
    try:
        with store.session() as db:
            project = db.query(Project).filter(Project.slug == slug).first()
            return normalize(project.to_dict()) if project else None
    except (StoreUnavailable, SQLAlchemyError) as e:
        logger.error(f"Failed to load project '{slug}': {e}")
        return None


def get_article_by_slug(store: DocumentStore, slug: str) -> Optional[dict]:
    try:
        with store.session() as db:
            article = db.query(Article).filter(Article.slug == slug).first()
            return normalize(article.to_dict()) if article else None
    except (StoreUnavailable, SQLAlchemyError) as e:
        logger.error(f"Failed to load article '{slug}': {e}")
        return None


def get_resume(store: DocumentStore) -> Optional[dict]:
    try:
        with store.session() as db:
            return fetch_resume(db)
    except (StoreUnavailable, SQLAlchemyError) as e:
        logger.error(f"Failed to load resume: {e}")
        return None
