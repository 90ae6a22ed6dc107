# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Tests never pick up a developer database; individual fixtures build their own.
os.environ["DATABASE_URL"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")

from advocate_directory.api.v1.dependencies import (
    get_query_cache,
    get_query_log,
    get_query_service,
    get_rate_limiter,
    get_search_analytics,
)
from advocate_directory.db.session import Base
from advocate_directory.main import app as fastapi_app
from advocate_directory.scripts.seed import seed_advocates
from advocate_directory.services import (
    AdvocateQueryService,
    InMemoryAdvocateStore,
    QueryLog,
    RateLimiter,
    SearchAnalytics,
    SqlAdvocateStore,
)

TEST_DB_URL = "sqlite://"


def make_engine() -> Engine:
    return create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = make_engine()
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def bare_engine() -> Generator[Engine, None, None]:
    """Engine with no tables, so every advocate query fails."""
    engine = make_engine()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def seeded_engine(engine: Engine) -> Engine:
    """Engine whose advocates table holds the built-in dataset with ids 1..15."""
    seed_advocates(engine)
    return engine


@pytest.fixture()
def memory_store() -> InMemoryAdvocateStore:
    return InMemoryAdvocateStore()


@pytest.fixture()
def query_log() -> QueryLog:
    return QueryLog()


@pytest.fixture()
def sql_store(seeded_engine: Engine, query_log: QueryLog) -> SqlAdvocateStore:
    return SqlAdvocateStore(
        sessionmaker(bind=seeded_engine, autocommit=False, autoflush=False),
        query_log=query_log,
    )


@pytest.fixture(params=["memory", "database"])
def store(request: pytest.FixtureRequest) -> InMemoryAdvocateStore | SqlAdvocateStore:
    """Each test using this fixture runs once per backing store."""
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return request.getfixturevalue("sql_store")


@pytest.fixture()
def analytics() -> SearchAnalytics:
    return SearchAnalytics()


@pytest.fixture()
def service(
    store: InMemoryAdvocateStore | SqlAdvocateStore, analytics: SearchAnalytics
) -> AdvocateQueryService:
    return AdvocateQueryService(store, analytics=analytics)


@pytest.fixture()
def rate_limiter() -> RateLimiter:
    return RateLimiter(max_requests=1000, window_seconds=60)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(
    app: FastAPI,
    service: AdvocateQueryService,
    analytics: SearchAnalytics,
    query_log: QueryLog,
    rate_limiter: RateLimiter,
) -> Iterator[TestClient]:
    app.dependency_overrides[get_query_service] = lambda: service
    app.dependency_overrides[get_search_analytics] = lambda: analytics
    app.dependency_overrides[get_query_cache] = lambda: None
    app.dependency_overrides[get_query_log] = lambda: query_log
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
