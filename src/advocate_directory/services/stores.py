"""Backing stores for advocate queries.

Two implementations share one interface: :class:`SqlAdvocateStore` pushes the
criteria down as SQL predicates, :class:`InMemoryAdvocateStore` evaluates the
same criteria against the fixed fallback dataset. :func:`build_store` picks
one from configuration when the application starts.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol

from sqlalchemy import Result, Select, String, and_, cast, column, exists, func, or_, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql.elements import ColumnElement

from advocate_directory.core.errors import DataSourceError
from advocate_directory.core.settings import Settings, settings
from advocate_directory.data import FALLBACK_ADVOCATES, AdvocateRecord
from advocate_directory.db import session as db_session
from advocate_directory.models import Advocate
from advocate_directory.services.criteria import (
    Criterion,
    RangeMatch,
    SortSpec,
    TagMatch,
    TextMatch,
    matches_all,
    sort_records,
)
from advocate_directory.services.query_log import QueryLog

logger = logging.getLogger(__name__)

STORE_DATABASE = "database"
STORE_MEMORY = "memory"


class AdvocateStore(Protocol):
    """Read-only source of advocate records."""

    kind: str
    supports_cursor: bool

    def count(self, criteria: Sequence[Criterion]) -> int:
        """Return how many records satisfy every criterion."""
        ...

    def fetch(
        self,
        criteria: Sequence[Criterion],
        sort: SortSpec,
        limit: int,
        offset: int = 0,
        cursor: int | None = None,
    ) -> list[AdvocateRecord]:
        """Return one ordered window of matching records."""
        ...

    def ping(self) -> bool:
        """Return True if the store is reachable."""
        ...


class InMemoryAdvocateStore:
    """Store over an immutable in-process sequence of records.

    Supports offset pagination only; a cursor is accepted and ignored.
    """

    kind = STORE_MEMORY
    supports_cursor = False

    def __init__(self, records: Iterable[AdvocateRecord] = FALLBACK_ADVOCATES) -> None:
        self._records: tuple[AdvocateRecord, ...] = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def _filter(self, criteria: Sequence[Criterion]) -> list[AdvocateRecord]:
        return [record for record in self._records if matches_all(record, criteria)]

    def count(self, criteria: Sequence[Criterion]) -> int:
        return len(self._filter(criteria))

    def fetch(
        self,
        criteria: Sequence[Criterion],
        sort: SortSpec,
        limit: int,
        offset: int = 0,
        cursor: int | None = None,
    ) -> list[AdvocateRecord]:
        ordered = sort_records(self._filter(criteria), sort)
        return ordered[offset : offset + limit]

    def ping(self) -> bool:
        return True


_TEXT_COLUMNS = {
    "first_name": Advocate.first_name,
    "last_name": Advocate.last_name,
    "city": Advocate.city,
    "degree": Advocate.degree,
}

_SORT_COLUMNS = {
    "first_name": Advocate.first_name,
    "last_name": Advocate.last_name,
    "city": Advocate.city,
    "years_of_experience": Advocate.years_of_experience,
    "created_at": Advocate.created_at,
}

# Set-returning function that expands a JSON array into one row per element.
_TAG_EXPANDERS = {"postgresql": "json_array_elements_text"}
_DEFAULT_TAG_EXPANDER = "json_each"


def _any_tag_contains(terms: Sequence[str], dialect_name: str) -> ColumnElement[bool]:
    expander = getattr(func, _TAG_EXPANDERS.get(dialect_name, _DEFAULT_TAG_EXPANDER))
    tags = expander(Advocate.specialties).table_valued(column("value", String))
    return exists(
        select(1)
        .select_from(tags)
        .where(or_(*(tags.c.value.icontains(term, autoescape=True) for term in terms)))
    )


def _field_contains(field_name: str, term: str, dialect_name: str) -> ColumnElement[bool]:
    if field_name == "specialties":
        return _any_tag_contains((term,), dialect_name)
    if field_name == "phone_number":
        return cast(Advocate.phone_number, String).icontains(term, autoescape=True)
    return _TEXT_COLUMNS[field_name].icontains(term, autoescape=True)


def criterion_clause(criterion: Criterion, dialect_name: str = "sqlite") -> ColumnElement[bool]:
    """Translate one criterion into a SQL boolean expression.

    Specialty terms are matched against each array element, so a term never
    spans two tags.
    """
    if isinstance(criterion, TextMatch):
        return or_(
            *(_field_contains(name, criterion.term, dialect_name) for name in criterion.fields)
        )
    if isinstance(criterion, TagMatch):
        return _any_tag_contains(criterion.terms, dialect_name)
    if isinstance(criterion, RangeMatch):
        column_ = _SORT_COLUMNS[criterion.field]
        bounds = []
        if criterion.minimum is not None:
            bounds.append(column_ >= criterion.minimum)
        if criterion.maximum is not None:
            bounds.append(column_ <= criterion.maximum)
        return and_(*bounds)
    raise TypeError(f"Unsupported criterion: {criterion!r}")


class SqlAdvocateStore:
    """Store backed by the ``advocates`` table."""

    kind = STORE_DATABASE
    supports_cursor = True

    def __init__(
        self,
        session_factory: Callable[[], Session],
        query_log: QueryLog | None = None,
    ) -> None:
        """Initialize the store with a factory producing short-lived sessions.

        Args:
            session_factory: Callable returning a new ``Session``
            query_log: Optional sink receiving the timing of every statement
        """
        self._session_factory = session_factory
        self.query_log = query_log

    def _run(
        self,
        session: Session,
        operation: str,
        stmt: Select[Any],
        collect: Callable[[Result[Any]], Any],
    ) -> Any:
        started = time.perf_counter()
        try:
            value = collect(session.execute(stmt))
        except SQLAlchemyError as exc:
            self._observe(session, operation, stmt, started, error=str(exc))
            logger.error("Advocate %s query failed: %s", operation, exc, exc_info=True)
            raise DataSourceError(f"Failed to {operation} advocates") from exc
        row_count = len(value) if isinstance(value, list) else None
        self._observe(session, operation, stmt, started, row_count=row_count)
        return value

    def _observe(
        self,
        session: Session,
        operation: str,
        stmt: Select[Any],
        started: float,
        *,
        row_count: int | None = None,
        error: str | None = None,
    ) -> None:
        if self.query_log is None:
            return
        duration_ms = (time.perf_counter() - started) * 1000
        self.query_log.record(
            operation,
            str(stmt.compile(dialect=session.get_bind().dialect)),
            duration_ms,
            row_count=row_count,
            error=error,
        )

    def count(self, criteria: Sequence[Criterion]) -> int:
        session = self._session_factory()
        try:
            dialect_name = session.get_bind().dialect.name
            stmt = select(func.count()).select_from(Advocate)
            clauses = [criterion_clause(criterion, dialect_name) for criterion in criteria]
            if clauses:
                stmt = stmt.where(*clauses)
            return int(self._run(session, "count", stmt, lambda result: result.scalar_one()))
        finally:
            session.close()

    def fetch(
        self,
        criteria: Sequence[Criterion],
        sort: SortSpec,
        limit: int,
        offset: int = 0,
        cursor: int | None = None,
    ) -> list[AdvocateRecord]:
        session = self._session_factory()
        try:
            dialect_name = session.get_bind().dialect.name
            clauses = [criterion_clause(criterion, dialect_name) for criterion in criteria]
            if cursor is not None:
                clauses.append(Advocate.id < cursor if sort.descending else Advocate.id > cursor)

            sort_column = _SORT_COLUMNS[sort.attribute]
            if sort.descending:
                order_by = (sort_column.desc(), Advocate.id.desc())
            else:
                order_by = (sort_column.asc(), Advocate.id.asc())

            stmt = select(Advocate)
            if clauses:
                stmt = stmt.where(*clauses)
            stmt = stmt.order_by(*order_by).limit(limit).offset(0 if cursor is not None else offset)

            rows = self._run(session, "fetch", stmt, lambda result: list(result.scalars()))
            return [AdvocateRecord.from_model(row) for row in rows]
        finally:
            session.close()

    def ping(self) -> bool:
        session = self._session_factory()
        try:
            session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.warning("Database ping failed: %s", exc)
            return False
        finally:
            session.close()


def build_store(config: Settings = settings, query_log: QueryLog | None = None) -> AdvocateStore:
    """Select the backing store once, from configuration.

    Args:
        config: Settings to read the database URL from
        query_log: Statement log handed to the SQL-backed store

    Returns:
        A SQL-backed store when a database URL is configured, otherwise the
        in-memory store over the fallback dataset
    """
    url = config.effective_database_url
    if not url:
        logger.info("DATABASE_URL not set; serving the built-in advocate dataset")
        return InMemoryAdvocateStore()

    if config is settings and db_session.SessionLocal is not None:
        factory = db_session.SessionLocal
    else:
        engine = db_session.build_engine(url, echo=config.sql_debug)
        factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info("Serving advocates from the configured database")
    return SqlAdvocateStore(factory, query_log=query_log)
