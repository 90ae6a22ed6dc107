"""Advocate-related Pydantic schemas.

Field names serialize in camelCase to match the public JSON contract.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from advocate_directory.services.advocate_query import AdvocatePage


class CamelModel(BaseModel):
    """Base schema emitting camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AdvocateOut(CamelModel):
    """Schema for advocate information returned by the API."""

    id: int | None = None
    first_name: str
    last_name: str
    city: str
    degree: str
    specialties: list[str] = Field(default_factory=list)
    years_of_experience: int
    phone_number: int
    profile_image_url: str | None = None
    bio: str | None = None
    created_at: datetime | None = None

    @field_validator("specialties", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> Any:
        if isinstance(value, tuple):
            return list(value)
        return value


class PaginationOut(CamelModel):
    """Pagination metadata for a list response."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
    next_cursor: str | None = None
    previous_cursor: str | None = None


class ResponseMeta(CamelModel):
    """Diagnostics about how a response was produced."""

    response_time: float
    cached: bool
    source: Literal["database", "memory"]


class AdvocateListResponse(CamelModel):
    """Body of ``GET /advocates``."""

    data: list[AdvocateOut]
    pagination: PaginationOut
    meta: ResponseMeta | None = None

    @classmethod
    def from_page(cls, page: AdvocatePage) -> AdvocateListResponse:
        return cls(
            data=[AdvocateOut.model_validate(record) for record in page.data],
            pagination=PaginationOut.model_validate(page.pagination),
            meta=ResponseMeta(
                response_time=round(page.response_time_ms, 2),
                cached=page.cached,
                source=page.source,
            ),
        )


class ErrorDetail(BaseModel):
    field: str
    message: str
    received: Any = None


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    error: str
    message: str
    details: list[ErrorDetail] | dict[str, Any] | None = None
