"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.kudo import Kudo

__all__ = ["Base", "Kudo", "TimestampMixin"]
