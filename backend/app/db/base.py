"""
Declarative base and shared columns for all models.
"""
from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base
from app.core.utils import utcnow

Base = declarative_base()


class TimestampMixin:
    """created_at / updated_at maintained by SQLAlchemy."""
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class BaseModel(TimestampMixin, Base):
    """Abstract base for entities whose id comes from the sequence counters."""
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=False, index=True)
