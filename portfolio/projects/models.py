"""
Projects database models.

Stores portfolio project documents: metadata, tags and optional links.
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text, func

from portfolio.shared.database import Base, JSONDocument


def new_document_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """
    Project document.

    ``slug`` is the stable external key; ``id`` is opaque and store-assigned.
    ``link``, ``github`` and ``image`` are optional and left NULL when absent.
    """
    __tablename__ = "projects"

    id = Column(String(32), primary_key=True, default=new_document_id)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    tags = Column(JSONDocument, nullable=False, default=list)  # ["FastAPI", "PostgreSQL"]
    link = Column(String(500))
    github = Column(String(500))
    image = Column(String(500))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def to_dict(self) -> dict:
        """Full document including internal timestamps."""
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "tags": self.tags or [],
            "link": self.link,
            "github": self.github,
            "image": self.image,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
