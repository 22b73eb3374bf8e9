"""
Pydantic schemas for the resume document.
"""
from typing import Optional

from pydantic import Field

from portfolio.shared.schemas import CamelModel


class Contact(CamelModel):
    email: str = ""
    mobile: str = ""
    linkedin: str = ""
    github: str = ""
    leetcode: str = ""
    location: str = ""


class Experience(CamelModel):
    role: str
    company: str
    duration: str = ""
    description: str = ""
    highlights: list[str] = Field(default_factory=list)


class Education(CamelModel):
    degree: str = ""
    university: str = ""
    year: str = ""


class ResumeDocument(CamelModel):
    """The complete resume. A PUT replaces every field."""
    summary: str = ""
    contact: Contact = Field(default_factory=Contact)
    experience: list[Experience] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    education: Education = Field(default_factory=Education)
    certifications: list[str] = Field(default_factory=list)
    resume_link: Optional[str] = Field(None, max_length=500)
