"""
Resume database model

Single-row table: the resume always lives at id=1 and is replaced as a
whole document on every write.
"""
from sqlalchemy import Column, DateTime, Integer, String, Text, func

from portfolio.shared.database import Base, JSONDocument

RESUME_ID = 1


class Resume(Base):
    __tablename__ = "resume"

    id = Column(Integer, primary_key=True)  # Always 1
    summary = Column(Text, nullable=False, default="")
    contact = Column(JSONDocument, nullable=False, default=dict)
    experience = Column(JSONDocument, nullable=False, default=list)
    skills = Column(JSONDocument, nullable=False, default=list)
    education = Column(JSONDocument, nullable=False, default=dict)
    certifications = Column(JSONDocument, nullable=False, default=list)
    resume_link = Column(String(500))
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "summary": self.summary,
            "contact": self.contact or {},
            "experience": self.experience or [],
            "skills": self.skills or [],
            "education": self.education or {},
            "certifications": self.certifications or [],
            "resume_link": self.resume_link,
            "updated_at": self.updated_at,
        }
