"""Tests for the query monitoring endpoints."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from advocate_directory.services import AdvocateQueryService, QueryLog

URL = "/api/v1/monitoring"


def test_stats_count_store_statements(
    client: TestClient, service: AdvocateQueryService
) -> None:
    client.get("/api/v1/advocates", params={"search": "anxiety"})
    r = client.get(URL)
    assert r.status_code == status.HTTP_200_OK
    stats = r.json()
    # One count and one fetch per search against the database.
    expected = 2 if service.store.kind == "database" else 0
    assert stats["total"] == expected
    assert stats["failed"] == 0


def test_views(client: TestClient, query_log: QueryLog) -> None:
    query_log.record("count", "SELECT count(*) FROM advocates", 4.0)
    query_log.record("fetch", "SELECT * FROM advocates", 1500.0, row_count=20)
    query_log.record("fetch", "SELECT * FROM missing", 2.0, error="no such table")

    recent = client.get(URL, params={"type": "recent", "limit": "2"}).json()
    assert [item["durationMs"] for item in recent] == [1500.0, 2.0]

    slow = client.get(URL, params={"type": "slow"}).json()
    assert [item["rowCount"] for item in slow] == [20]
    slow = client.get(URL, params={"type": "slow", "threshold": "3"}).json()
    assert len(slow) == 2

    errors = client.get(URL, params={"type": "errors"}).json()
    assert [item["error"] for item in errors] == ["no such table"]


@pytest.mark.parametrize(
    ("params", "field"),
    [
        ({"type": "bogus"}, "type"),
        ({"type": "recent", "limit": "0"}, "limit"),
        ({"type": "slow", "threshold": "fast"}, "threshold"),
    ],
)
def test_invalid_requests(client: TestClient, params: dict, field: str) -> None:
    r = client.get(URL, params=params)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["error"] == "VALIDATION_ERROR"
    assert r.json()["details"][0]["field"] == field


def test_clear(client: TestClient, query_log: QueryLog) -> None:
    query_log.record("count", "SELECT 1", 1.0)
    r = client.delete(URL)
    assert r.status_code == status.HTTP_200_OK
    assert len(query_log) == 0
