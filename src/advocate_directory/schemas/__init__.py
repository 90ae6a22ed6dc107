"""Pydantic schemas for request and response bodies."""

from .advocate import (
    AdvocateListResponse,
    AdvocateOut,
    ErrorResponse,
    PaginationOut,
    ResponseMeta,
)

__all__ = [
    "AdvocateListResponse",
    "AdvocateOut",
    "ErrorResponse",
    "PaginationOut",
    "ResponseMeta",
]
