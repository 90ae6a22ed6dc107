# src/advocate_directory/main.py
"""Main entry point for the advocate directory application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from advocate_directory.api.v1 import (
    advocates_router,
    analytics_router,
    monitoring_router,
    system_router,
)
from advocate_directory.core.errors import AdvocateDirectoryError, RateLimitError
from advocate_directory.core.settings import Settings, settings
from advocate_directory.services import (
    AdvocateQueryService,
    QueryCache,
    QueryLog,
    RateLimiter,
    SearchAnalytics,
    build_store,
)

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Advocate Directory API",
    description="Search, filter and compare healthcare advocates",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(advocates_router, prefix="/api/v1")
app.include_router(analytics_router, prefix="/api/v1")
app.include_router(monitoring_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


def configure_services(target: FastAPI, config: Settings = settings) -> None:
    """Build the query service and its collaborators and attach them to ``target``.

    The backing store is chosen here, once, from ``config``.
    """
    analytics = SearchAnalytics(max_events=config.search_history_size)
    cache = (
        QueryCache(
            ttl_seconds=config.query_cache_ttl_seconds,
            max_entries=config.query_cache_max_entries,
        )
        if config.query_cache_enabled
        else None
    )
    limiter = (
        RateLimiter(
            max_requests=config.rate_limit_requests,
            window_seconds=config.rate_limit_window_seconds,
        )
        if config.rate_limit_enabled
        else None
    )
    query_log = QueryLog(
        max_entries=config.query_log_size,
        slow_query_ms=config.slow_query_threshold_ms,
    )
    target.state.search_analytics = analytics
    target.state.query_log = query_log
    target.state.query_cache = cache
    target.state.rate_limiter = limiter
    target.state.query_service = AdvocateQueryService(
        build_store(config, query_log=query_log),
        analytics=analytics,
        cache=cache,
        default_limit=config.default_page_size,
        max_limit=config.max_page_size,
    )


configure_services(app)


@app.exception_handler(AdvocateDirectoryError)
async def handle_directory_error(request: Request, exc: AdvocateDirectoryError) -> JSONResponse:
    """Render service errors as JSON with their status code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"Retry-After": str(exc.retry_after)} if isinstance(exc, RateLimitError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.on_event("startup")
async def on_startup() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "%s %s serving advocates from %s",
        settings.app_name,
        settings.app_version,
        app.state.query_service.source,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Advocate Directory API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("advocate_directory.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
