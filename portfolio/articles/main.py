"""
Articles API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portfolio.articles.models import Article
from portfolio.articles.schemas import ArticleCreate, ArticleUpdate
from portfolio.content.api import fetch_articles
from portfolio.content.crud import create_document, delete_document, get_document, update_document
from portfolio.shared.auth import AdminSession, require_session
from portfolio.shared.database import get_db

router = APIRouter(prefix="/api/articles", tags=["articles"])


@router.get("")
def list_all_articles(db: Session = Depends(get_db)):
    """List all articles, sorted by slug (descending)."""
    return {"success": True, "data": fetch_articles(db)}


@router.get("/{article_id}")
def get_article(article_id: str, db: Session = Depends(get_db)):
    return {"success": True, "data": get_document(db, Article, article_id)}


@router.post("", status_code=201)
def create_article(
    article_data: ArticleCreate,
    session: AdminSession = Depends(require_session),
    db: Session = Depends(get_db),
):
    article = create_document(db, Article, article_data.model_dump())
    return {"success": True, "data": article}


@router.api_route("/{article_id}", methods=["PUT", "PATCH"])
def update_article(
    article_id: str,
    article_data: ArticleUpdate,
    session: AdminSession = Depends(require_session),
    db: Session = Depends(get_db),
):
    changes = article_data.model_dump(exclude_unset=True)
    article = update_document(db, Article, article_id, changes)
    return {"success": True, "data": article}


@router.delete("/{article_id}")
def delete_article(
    article_id: str,
    session: AdminSession = Depends(require_session),
    db: Session = Depends(get_db),
):
    delete_document(db, Article, article_id)
    return {"success": True, "message": "Article deleted successfully"}
