"""
Resume API

The resume is a singleton document at a fixed key. PUT replaces it as a
whole with one atomic upsert.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio.content.api import fetch_resume
from portfolio.resume.models import RESUME_ID, Resume
from portfolio.resume.schemas import ResumeDocument
from portfolio.shared.auth import AdminSession, require_session
from portfolio.shared.database import get_db
from portfolio.shared.errors import ValidationFailure
from portfolio.shared.upsert import atomic_upsert_singleton

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resume", tags=["resume"])


def save_resume(db: Session, document: ResumeDocument) -> None:
    """Replace the stored resume with ``document`` (no commit)."""
    atomic_upsert_singleton(
        db=db,
        model=Resume,
        data={"id": RESUME_ID, **document.model_dump()},
    )


@router.get("")
def get_resume(db: Session = Depends(get_db)):
    """The resume, or null when none has been saved yet."""
    return {"success": True, "data": fetch_resume(db)}


@router.put("")
def put_resume(
    document: ResumeDocument,
    session: AdminSession = Depends(require_session),
    db: Session = Depends(get_db),
):
    try:
        save_resume(db, document)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationFailure(f"Resume validation failed: {e.orig}") from e

    logger.info("Resume updated")
    return {"success": True, "data": fetch_resume(db)}
