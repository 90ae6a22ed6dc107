# src/advocate_directory/services/__init__.py
"""Query, caching, analytics and throttling services."""

from .advocate_query import AdvocatePage, AdvocateQueryService, PageInfo
from .analytics import SearchAnalytics
from .cache import QueryCache
from .query_log import QueryLog
from .rate_limit import RateLimiter
from .stores import AdvocateStore, InMemoryAdvocateStore, SqlAdvocateStore, build_store

__all__ = [
    "AdvocatePage",
    "AdvocateQueryService",
    "AdvocateStore",
    "InMemoryAdvocateStore",
    "PageInfo",
    "QueryCache",
    "QueryLog",
    "RateLimiter",
    "SearchAnalytics",
    "SqlAdvocateStore",
    "build_store",
]
