"""System health and runtime statistics endpoints."""

from __future__ import annotations

import time

from fastapi import APIRouter

from advocate_directory.api.v1.dependencies import (
    QueryCacheDep,
    QueryLogDep,
    QueryServiceDep,
    RateLimiterDep,
    SearchAnalyticsDep,
)
from advocate_directory.core.settings import settings

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
def get_system_health(service: QueryServiceDep) -> dict[str, object]:
    """Report whether the active backing store is reachable.

    Args:
        service: Query service whose store is probed

    Returns:
        Overall status, the store kind and version info
    """
    store_ok = service.store.ping()
    return {
        "status": "healthy" if store_ok else "unhealthy",
        "timestamp": int(time.time()),
        "components": {
            "store": {
                "kind": service.source,
                "status": "healthy" if store_ok else "unreachable",
            },
        },
        "version": settings.app_version,
    }


@router.get("/stats")
def get_system_stats(
    service: QueryServiceDep,
    analytics: SearchAnalyticsDep,
    cache: QueryCacheDep,
    query_log: QueryLogDep,
    limiter: RateLimiterDep,
) -> dict[str, object]:
    """Runtime counters for cache, analytics, queries and throttling."""
    if limiter is not None:
        limiter.cleanup()
    return {
        "timestamp": int(time.time()),
        "source": service.source,
        "cache": cache.stats() if cache is not None else {"enabled": False},
        "searches": analytics.stats(),
        "queries": query_log.stats(),
        "rateLimit": (
            {
                "enabled": True,
                "maxRequests": limiter.max_requests,
                "windowSeconds": limiter.window_seconds,
                "trackedClients": limiter.tracked_clients,
            }
            if limiter is not None
            else {"enabled": False}
        ),
        "environment": "development" if settings.debug else "production",
    }
