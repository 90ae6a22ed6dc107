# src/advocate_directory/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import advocates_router, analytics_router, monitoring_router, system_router

__all__ = [
    "advocates_router",
    "analytics_router",
    "monitoring_router",
    "system_router",
]
