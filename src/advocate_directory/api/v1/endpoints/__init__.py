# src/advocate_directory/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .advocates import router as advocates_router
from .analytics import router as analytics_router
from .monitoring import router as monitoring_router
from .system import router as system_router

__all__ = [
    "advocates_router",
    "analytics_router",
    "monitoring_router",
    "system_router",
]
