"""
Articles database models.
"""
from sqlalchemy import Column, DateTime, String, Text, func

from portfolio.projects.models import new_document_id, utcnow
from portfolio.shared.database import Base, JSONDocument


class Article(Base):
    """
    Article document.

    ``date`` is the publication date exactly as the author typed it; it is
    sorted as a string and never parsed. ``content`` holds the raw markup.
    """
    __tablename__ = "articles"

    id = Column(String(32), primary_key=True, default=new_document_id)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    title = Column(String(200), nullable=False)
    date = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    tags = Column(JSONDocument, nullable=False, default=list)
    content = Column(Text, nullable=False)
    cover_image = Column(String(500))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "date": self.date,
            "description": self.description,
            "tags": self.tags or [],
            "content": self.content,
            "cover_image": self.cover_image,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
