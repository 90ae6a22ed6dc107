"""Tests for the SQL and in-memory advocate stores."""

from dataclasses import replace

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from advocate_directory.core.errors import DataSourceError
from advocate_directory.core.settings import Settings
from advocate_directory.data import FALLBACK_ADVOCATES, AdvocateRecord
from advocate_directory.scripts.seed import seed_advocates
from advocate_directory.services import AdvocateQueryService, QueryLog
from advocate_directory.services.criteria import (
    SEARCH_FIELDS,
    RangeMatch,
    SortSpec,
    TagMatch,
    TextMatch,
)
from advocate_directory.services.stores import (
    InMemoryAdvocateStore,
    SqlAdvocateStore,
    build_store,
)

DEFAULT_SORT = SortSpec()


def _ids(records) -> list[int]:
    return [record.id for record in records]


def test_both_stores_hold_the_same_dataset(
    memory_store: InMemoryAdvocateStore, sql_store: SqlAdvocateStore
) -> None:
    memory_rows = memory_store.fetch([], DEFAULT_SORT, limit=100)
    sql_rows = sql_store.fetch([], DEFAULT_SORT, limit=100)
    assert _ids(memory_rows) == _ids(sql_rows) == list(range(15, 0, -1))
    assert sql_rows[0].specialties == memory_rows[0].specialties
    assert sql_rows[0].created_at == memory_rows[0].created_at


@pytest.mark.parametrize(
    ("criteria", "expected"),
    [
        ([TextMatch(SEARCH_FIELDS, "anxiety")], {2, 5, 9, 13}),
        ([TextMatch(SEARCH_FIELDS, "555123")], {1, 11}),
        ([TextMatch(SEARCH_FIELDS, "san")], {7, 8, 10, 13}),
        ([TextMatch(("city",), "SAN J")], {10}),
        ([TextMatch(("degree",), "md")], {1, 4, 7, 10, 13}),
        ([TagMatch(("ocd", "pain"))], {5, 6, 13}),
        ([RangeMatch("years_of_experience", 10, 12)], {1, 4, 7, 11}),
        (
            [TextMatch(("degree",), "MD"), RangeMatch("years_of_experience", None, 11)],
            {1, 7},
        ),
        ([TextMatch(SEARCH_FIELDS, "%")], set()),
        ([TextMatch(SEARCH_FIELDS, "_")], set()),
    ],
)
def test_filters_agree_across_stores(
    memory_store: InMemoryAdvocateStore,
    sql_store: SqlAdvocateStore,
    criteria: list,
    expected: set[int],
) -> None:
    for backing in (memory_store, sql_store):
        assert backing.count(criteria) == len(expected)
        assert set(_ids(backing.fetch(criteria, DEFAULT_SORT, limit=100))) == expected


@pytest.mark.parametrize("field", ["firstName", "lastName", "city", "yearsOfExperience", "createdAt"])
@pytest.mark.parametrize("order", ["asc", "desc"])
def test_sort_order_agrees_across_stores(
    memory_store: InMemoryAdvocateStore,
    sql_store: SqlAdvocateStore,
    field: str,
    order: str,
) -> None:
    sort = SortSpec(field, order)
    assert _ids(memory_store.fetch([], sort, limit=100)) == _ids(
        sql_store.fetch([], sort, limit=100)
    )


def test_offset_window(store) -> None:
    rows = store.fetch([], DEFAULT_SORT, limit=5, offset=5)
    assert _ids(rows) == [10, 9, 8, 7, 6]


def test_sql_cursor_predicate_follows_sort_direction(sql_store: SqlAdvocateStore) -> None:
    older = sql_store.fetch([], SortSpec("createdAt", "desc"), limit=3, offset=7, cursor=10)
    assert _ids(older) == [9, 8, 7]
    newer = sql_store.fetch([], SortSpec("createdAt", "asc"), limit=3, offset=7, cursor=10)
    assert _ids(newer) == [11, 12, 13]


def test_memory_store_ignores_cursor(memory_store: InMemoryAdvocateStore) -> None:
    with_cursor = memory_store.fetch([], DEFAULT_SORT, limit=3, cursor=10)
    without = memory_store.fetch([], DEFAULT_SORT, limit=3)
    assert with_cursor == without


def test_memory_store_does_not_mutate_its_records(memory_store: InMemoryAdvocateStore) -> None:
    memory_store.fetch([], SortSpec("city", "asc"), limit=100)
    assert _ids(FALLBACK_ADVOCATES) == list(range(1, 16))
    assert len(memory_store) == 15


def test_sql_store_wraps_driver_failures(bare_engine: Engine) -> None:
    broken = SqlAdvocateStore(sessionmaker(bind=bare_engine))
    with pytest.raises(DataSourceError) as exc_info:
        broken.count([])
    assert exc_info.value.status_code == 503
    with pytest.raises(DataSourceError):
        broken.fetch([], DEFAULT_SORT, limit=5)


def test_ping(store) -> None:
    assert store.ping() is True


def test_build_store_without_database_url() -> None:
    built = build_store(Settings(DATABASE_URL=None))
    assert isinstance(built, InMemoryAdvocateStore)
    assert built.kind == "memory"
    assert built.supports_cursor is False


def test_build_store_with_database_url() -> None:
    built = build_store(Settings(DATABASE_URL="sqlite://"))
    assert isinstance(built, SqlAdvocateStore)
    assert built.kind == "database"
    assert built.ping() is True


def test_build_store_prefers_test_database() -> None:
    config = Settings(
        DATABASE_URL=None,
        TEST_DATABASE_URL="sqlite://",
        USE_TEST_DATABASE=True,
    )
    assert config.effective_database_url == "sqlite://"
    assert isinstance(build_store(config), SqlAdvocateStore)


def _advocate(first_name: str, specialties: tuple[str, ...]) -> AdvocateRecord:
    return AdvocateRecord(
        first_name=first_name,
        last_name="Reyes",
        city="El Paso",
        degree="MSW",
        years_of_experience=6,
        phone_number=5550001111,
        specialties=specialties,
    )


@pytest.mark.parametrize(
    ("params", "expected"),
    [
        ({"specialties": "niños"}, [1]),
        ({"search": "niños"}, [1]),
        ({"search": "terapia niñ"}, [1]),
        ({"specialties": 'f", "s'}, []),
        ({"specialties": "grief,sleep"}, [2]),
        ({"search": '"'}, []),
        ({"search": ","}, []),
        ({"search": "[\""}, []),
    ],
)
def test_specialty_terms_match_single_tags_in_both_stores(
    engine: Engine, params: dict[str, str], expected: list[int]
) -> None:
    records = [
        _advocate("Lucia", ("Terapia Niños",)),
        _advocate("Marco", ("Grief", "Sleep")),
    ]
    seed_advocates(engine, records)
    in_memory = InMemoryAdvocateStore(
        replace(record, id=index)
        for index, record in enumerate(records, start=1)
    )
    relational = SqlAdvocateStore(sessionmaker(bind=engine))

    for backing in (in_memory, relational):
        page = AdvocateQueryService(backing).search({**params, "sortOrder": "asc"})
        assert _ids(page.data) == expected, backing.kind


def test_sql_store_logs_each_statement(sql_store: SqlAdvocateStore, query_log: QueryLog) -> None:
    sql_store.count([TagMatch(("sleep",))])
    sql_store.fetch([], DEFAULT_SORT, limit=3)

    count_entry, fetch_entry = query_log.recent()
    assert count_entry.operation == "count"
    assert count_entry.success is True
    assert "advocates" in count_entry.statement
    assert fetch_entry.operation == "fetch"
    assert fetch_entry.row_count == 3
    assert fetch_entry.duration_ms >= 0


def test_sql_store_logs_failed_statements(bare_engine: Engine) -> None:
    query_log = QueryLog()
    broken = SqlAdvocateStore(sessionmaker(bind=bare_engine), query_log=query_log)
    with pytest.raises(DataSourceError):
        broken.fetch([], DEFAULT_SORT, limit=5)
    (entry,) = query_log.errors()
    assert entry.operation == "fetch"
    assert entry.error and "advocates" in entry.error
