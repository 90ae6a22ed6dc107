"""Advocate directory service: search, filter and paginate advocate profiles."""

__version__ = "0.1.0"
