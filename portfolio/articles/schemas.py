"""
Pydantic schemas for Articles API.
"""
from typing import Optional

from pydantic import Field

from portfolio.projects.schemas import SLUG_PATTERN
from portfolio.shared.schemas import CamelModel


class ArticleCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    date: str = Field(..., min_length=1, max_length=50)  # free text, e.g. "2024-05-01"
    description: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    content: str = Field(..., min_length=1)
    cover_image: Optional[str] = Field(None, max_length=500)


class ArticleUpdate(CamelModel):
    """All fields optional; only provided fields are written."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    date: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, min_length=1)
    tags: Optional[list[str]] = None
    content: Optional[str] = Field(None, min_length=1)
    cover_image: Optional[str] = Field(None, max_length=500)
