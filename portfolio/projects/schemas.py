"""
Pydantic schemas for Projects API.

Defines request models with validation. Responses are built by the
content normalizer, not by these models.
"""
from typing import Optional

from pydantic import Field

from portfolio.shared.schemas import CamelModel

SLUG_PATTERN = r"^[a-z0-9-]+$"


class ProjectBase(CamelModel):
    """Base schema with common project fields."""
    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    link: Optional[str] = Field(None, max_length=500)
    github: Optional[str] = Field(None, max_length=500)
    image: Optional[str] = Field(None, max_length=500)


class ProjectCreate(ProjectBase):
    """Schema for creating a new project."""
    pass


class ProjectUpdate(CamelModel):
    """Schema for updating a project. All fields optional."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    tags: Optional[list[str]] = None
    link: Optional[str] = Field(None, max_length=500)
    github: Optional[str] = Field(None, max_length=500)
    image: Optional[str] = Field(None, max_length=500)
