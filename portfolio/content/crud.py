"""
Write helpers shared by the Projects and Articles APIs.

Each helper performs exactly one mutation and commits it. Store-level
rejections (unique slug, NOT NULL) roll the session back and surface as
ValidationFailure with the store's message.
"""
import logging
from typing import Any, Dict, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio.content.api import normalize
from portfolio.shared.database import Base
from portfolio.shared.errors import NotFound, ValidationFailure

logger = logging.getLogger(__name__)


def _ensure_unique_slug(db: Session, model: Type[Base], slug: str) -> None:
    if db.query(model.id).filter(model.slug == slug).first():
        raise ValidationFailure("Slug already exists")


def _commit(db: Session, model: Type[Base]) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"{model.__name__} write rejected: {e.orig}")
        raise ValidationFailure(f"{model.__name__} validation failed: {e.orig}") from e


def get_document(db: Session, model: Type[Base], document_id: str) -> dict:
    record = db.get(model, document_id)
    if not record:
        raise NotFound(f"{model.__name__} not found")
    return normalize(record.to_dict())


def create_document(db: Session, model: Type[Base], data: Dict[str, Any]) -> dict:
    # The unique index still guards against a concurrent insert of the same slug
    _ensure_unique_slug(db, model, data["slug"])

    record = model(**data)
    db.add(record)
    _commit(db, model)
    db.refresh(record)
    logger.info(f"Created {model.__name__} '{record.slug}'")
    return normalize(record.to_dict())


def update_document(
    db: Session,
    model: Type[Base],
    document_id: str,
    changes: Dict[str, Any],
) -> dict:
    """Apply only the provided fields to an existing document."""
    record = db.get(model, document_id)
    if not record:
        raise NotFound(f"{model.__name__} not found")

    new_slug = changes.get("slug")
    if new_slug and new_slug != record.slug:
        _ensure_unique_slug(db, model, new_slug)

    for key, value in changes.items():
        setattr(record, key, value)

    _commit(db, model)
    db.refresh(record)
    logger.info(f"Updated {model.__name__} '{record.slug}'")
    return normalize(record.to_dict())


def delete_document(db: Session, model: Type[Base], document_id: str) -> None:
    record = db.get(model, document_id)
    if not record:
        raise NotFound(f"{model.__name__} not found")

    db.delete(record)
    db.commit()
    logger.info(f"Deleted {model.__name__} '{record.slug}'")
