"""Advocate search: filtering, sorting and pagination over a backing store."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Mapping
from dataclasses import dataclass, replace

from advocate_directory.data.records import AdvocateRecord
from advocate_directory.services.analytics import SearchAnalytics
from advocate_directory.services.cache import QueryCache
from advocate_directory.services.criteria import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SearchQuery,
    parse_search_params,
)
from advocate_directory.services.stores import AdvocateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageInfo:
    """Pagination metadata for one result page."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
    next_cursor: str | None = None
    previous_cursor: str | None = None


@dataclass(frozen=True)
class AdvocatePage:
    """One page of search results."""

    data: tuple[AdvocateRecord, ...]
    pagination: PageInfo
    source: str
    response_time_ms: float = 0.0
    cached: bool = False


class AdvocateQueryService:
    """Translate raw search parameters into a filtered, sorted, paginated page.

    The service holds no per-call state; a single instance can serve
    concurrent requests. Each call costs one ``count`` and one ``fetch`` on
    the store, skipped entirely on a cache hit.
    """

    def __init__(
        self,
        store: AdvocateStore,
        *,
        analytics: SearchAnalytics | None = None,
        cache: QueryCache | None = None,
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
    ) -> None:
        self.store = store
        self.analytics = analytics
        self.cache = cache
        self.default_limit = default_limit
        self.max_limit = max_limit

    @property
    def source(self) -> str:
        return self.store.kind

    def search(self, params: Mapping[str, str | None]) -> AdvocatePage:
        """Run one search.

        Args:
            params: Raw query-string values keyed by public parameter name

        Returns:
            The requested page and its pagination metadata

        Raises:
            ValidationError: If the parameters are malformed; raised before
                the store is touched
            DataSourceError: If the store fails to count or fetch
        """
        started = time.perf_counter()
        query = parse_search_params(
            params, default_limit=self.default_limit, max_limit=self.max_limit
        )

        cached_page = self.cache.get(query.cache_key()) if self.cache is not None else None
        if cached_page is not None:
            page = replace(cached_page, cached=True)
        else:
            page = self._execute(query)
            if self.cache is not None:
                self.cache.set(query.cache_key(), page)

        elapsed_ms = (time.perf_counter() - started) * 1000
        page = replace(page, response_time_ms=elapsed_ms)
        self._observe(query, page)
        return page

    def _execute(self, query: SearchQuery) -> AdvocatePage:
        use_cursor = query.cursor is not None and self.store.supports_cursor
        if use_cursor and not query.sort.cursor_aligned:
            logger.warning(
                "Cursor pagination with sortBy=%s: id cursor does not follow the sort order",
                query.sort.field,
            )

        total = self.store.count(query.criteria)
        rows = self.store.fetch(
            query.criteria,
            query.sort,
            query.limit,
            offset=0 if use_cursor else query.offset,
            cursor=query.cursor if use_cursor else None,
        )

        total_pages = math.ceil(total / query.limit)
        next_cursor = previous_cursor = None
        if self.store.supports_cursor and rows:
            if len(rows) == query.limit and rows[-1].id is not None:
                next_cursor = str(rows[-1].id)
            if (use_cursor or query.page > 1) and rows[0].id is not None:
                previous_cursor = str(rows[0].id)

        return AdvocatePage(
            data=tuple(rows),
            pagination=PageInfo(
                page=query.page,
                limit=query.limit,
                total=total,
                total_pages=total_pages,
                has_next_page=query.page < total_pages,
                has_previous_page=query.page > 1,
                next_cursor=next_cursor,
                previous_cursor=previous_cursor,
            ),
            source=self.store.kind,
        )

    def _observe(self, query: SearchQuery, page: AdvocatePage) -> None:
        filters = query.filter_summary()
        logger.info(
            "search=%r filters=%s results=%d ms=%.1f source=%s cached=%s",
            query.search,
            filters,
            page.pagination.total,
            page.response_time_ms,
            page.source,
            page.cached,
        )
        if self.analytics is not None:
            self.analytics.record(
                query=query.search or "",
                filters=filters,
                result_count=page.pagination.total,
                response_time_ms=page.response_time_ms,
                source=page.source,
            )
