"""Tests for system health and statistics endpoints."""

from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from advocate_directory.api.v1.dependencies import get_query_cache
from advocate_directory.services import AdvocateQueryService, QueryCache


def test_system_health(client: TestClient, service: AdvocateQueryService) -> None:
    r = client.get("/api/v1/system/health")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["status"] == "healthy"
    assert data["components"]["store"] == {"kind": service.store.kind, "status": "healthy"}
    assert "version" in data and "timestamp" in data


def test_system_stats(client: TestClient, service: AdvocateQueryService) -> None:
    client.get("/api/v1/advocates", params={"search": "sleep"})
    r = client.get("/api/v1/system/stats")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["source"] == service.store.kind
    assert data["cache"] == {"enabled": False}
    assert data["searches"]["totalSearches"] == 1
    assert "total" in data["queries"]
    assert data["rateLimit"]["enabled"] is True
    assert data["rateLimit"]["trackedClients"] == 1


def test_system_stats_with_cache(app: FastAPI, client: TestClient) -> None:
    cache = QueryCache(ttl_seconds=60)
    cache.set("key", "value")
    app.dependency_overrides[get_query_cache] = lambda: cache
    data = client.get("/api/v1/system/stats").json()
    assert data["cache"]["entries"] == 1
    assert data["cache"]["hits"] == 0
