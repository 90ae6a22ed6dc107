"""SQLAlchemy models for the advocate directory."""

from .advocate import Advocate

__all__ = ["Advocate"]
