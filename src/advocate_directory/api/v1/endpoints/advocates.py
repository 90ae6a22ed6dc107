"""Advocate search endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from advocate_directory.api.v1.dependencies import QueryServiceDep, enforce_rate_limit
from advocate_directory.schemas.advocate import AdvocateListResponse, ErrorResponse

router = APIRouter(prefix="/advocates", tags=["advocates"])


@router.get(
    "",
    response_model=AdvocateListResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
def list_advocates(
    service: QueryServiceDep,
    page: str | None = Query(None, description="1-based page number (ignored with a cursor)"),
    limit: str | None = Query(None, description="Page size, clamped to 1..100"),
    search: str | None = Query(None, description="Free text matched against names, city, degree, phone and specialties"),
    city: str | None = Query(None, description="Substring of the city"),
    degree: str | None = Query(None, description="Substring of the degree"),
    specialties: str | None = Query(None, description="Comma-separated specialty terms, any may match"),
    min_experience: str | None = Query(None, alias="minExperience", description="Minimum years of experience"),
    max_experience: str | None = Query(None, alias="maxExperience", description="Maximum years of experience"),
    sort_by: str | None = Query(None, alias="sortBy", description="firstName, lastName, city, yearsOfExperience or createdAt"),
    sort_order: str | None = Query(None, alias="sortOrder", description="asc or desc"),
    cursor: str | None = Query(None, description="Id of the last record seen; switches to cursor pagination"),
) -> AdvocateListResponse:
    """Search, filter, sort and paginate advocates.

    All parameters are taken as raw strings and validated by the query
    service, so malformed numbers produce a 400 with a field-level reason.
    """
    result = service.search(
        {
            "page": page,
            "limit": limit,
            "search": search,
            "city": city,
            "degree": degree,
            "specialties": specialties,
            "minExperience": min_experience,
            "maxExperience": max_experience,
            "sortBy": sort_by,
            "sortOrder": sort_order,
            "cursor": cursor,
        }
    )
    return AdvocateListResponse.from_page(result)
