"""
Sequence counter model backing entity id allocation.
"""
from sqlalchemy import Column, String, Integer
from app.db.base import Base


class Counter(Base):
    """Current value of a named sequence (one row per entity kind)."""
    __tablename__ = "counters"

    name = Column(String(50), primary_key=True)
    seq = Column(Integer, nullable=False, default=0)
