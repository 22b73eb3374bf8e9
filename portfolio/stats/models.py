"""
Cached third-party profile statistics

One row per ``provider:username`` key. ``timestamp`` is the epoch time the
payload was fetched and is what the TTL check compares against.
"""
from sqlalchemy import Column, DateTime, Float, Integer, String, func

from portfolio.shared.database import Base, JSONDocument


class StatsCacheEntry(Base):
    __tablename__ = "stats_cache"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cache_key = Column(String(255), nullable=False, unique=True, index=True)
    data = Column(JSONDocument, nullable=False)
    timestamp = Column(Float, nullable=False)  # Unix time of the fetch
    fetched_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        """Convert to dictionary for API response"""
        return {
            "key": self.cache_key,
            "data": self.data,
            "timestamp": self.timestamp,
        }
