"""Advocate records and the built-in fallback dataset."""

from .fallback import FALLBACK_ADVOCATES
from .records import AdvocateRecord

__all__ = ["AdvocateRecord", "FALLBACK_ADVOCATES"]
