"""Shared API dependencies resolving the services attached to the application."""

from typing import Annotated

from fastapi import Depends, Request, Response

from advocate_directory.core.errors import ValidationError

from advocate_directory.services import (
    AdvocateQueryService,
    QueryCache,
    QueryLog,
    RateLimiter,
    SearchAnalytics,
)


def get_query_service(request: Request) -> AdvocateQueryService:
    """Return the query service built at application startup."""
    return request.app.state.query_service


def get_search_analytics(request: Request) -> SearchAnalytics:
    """Return the analytics sink shared by the query service."""
    return request.app.state.search_analytics


def get_query_log(request: Request) -> QueryLog:
    """Return the statement log fed by the relational store."""
    return request.app.state.query_log


def get_query_cache(request: Request) -> QueryCache | None:
    """Return the result cache, or None when caching is disabled."""
    return request.app.state.query_cache


def get_rate_limiter(request: Request) -> RateLimiter | None:
    """Return the request limiter, or None when throttling is disabled."""
    return request.app.state.rate_limiter


QueryServiceDep = Annotated[AdvocateQueryService, Depends(get_query_service)]
SearchAnalyticsDep = Annotated[SearchAnalytics, Depends(get_search_analytics)]
QueryLogDep = Annotated[QueryLog, Depends(get_query_log)]
QueryCacheDep = Annotated[QueryCache | None, Depends(get_query_cache)]
RateLimiterDep = Annotated[RateLimiter | None, Depends(get_rate_limiter)]


def _client_id(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "anonymous"


def enforce_rate_limit(request: Request, response: Response, limiter: RateLimiterDep) -> None:
    """Count the request against the caller's allowance.

    Raises:
        RateLimitError: If the caller has exhausted the current window
    """
    if limiter is None:
        return
    decision = limiter.enforce(_client_id(request))
    response.headers["X-RateLimit-Limit"] = str(decision.limit)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    response.headers["X-RateLimit-Reset"] = str(decision.retry_after)


def bounded_int(name: str, raw: str | None, default: int, low: int, high: int) -> int:
    """Parse an optional integer query parameter that must lie in ``low..high``.

    Raises:
        ValidationError: If ``raw`` is not an integer or falls outside the bounds
    """
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(name, f"{name} must be an integer", received=raw) from None
    if not low <= value <= high:
        raise ValidationError(name, f"{name} must be between {low} and {high}", received=value)
    return value
