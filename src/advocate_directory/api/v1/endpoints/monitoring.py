"""Relational query monitoring endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from advocate_directory.api.v1.dependencies import QueryLogDep, bounded_int
from advocate_directory.core.errors import ValidationError

router = APIRouter(prefix="/monitoring", tags=["monitoring"])

MONITORING_TYPES = ("stats", "slow", "errors", "recent")


@router.get("")
def get_monitoring(
    query_log: QueryLogDep,
    type_: str = Query("stats", alias="type", description="stats, slow, errors or recent"),
    threshold: str | None = Query(None, description="Slow query threshold in milliseconds"),
    limit: str | None = Query(None, description="Number of recent statements"),
) -> Any:
    """Return timings of the statements issued against the advocates table.

    Raises:
        ValidationError: If the view type or one of its parameters is invalid
    """
    if type_ == "stats":
        return query_log.stats()

    if type_ == "slow":
        threshold_ms = None
        if threshold is not None and threshold.strip():
            threshold_ms = bounded_int("threshold", threshold, 0, 0, 3_600_000)
        return [entry.to_dict() for entry in query_log.slow(threshold_ms)]

    if type_ == "errors":
        return [entry.to_dict() for entry in query_log.errors()]

    if type_ == "recent":
        count = bounded_int("limit", limit, 50, 1, 1000)
        return [entry.to_dict() for entry in query_log.recent(count)]

    raise ValidationError(
        "type",
        f"Invalid type parameter. Use one of: {', '.join(MONITORING_TYPES)}",
        received=type_,
    )


@router.delete("")
def clear_monitoring(query_log: QueryLogDep) -> dict[str, str]:
    """Forget all recorded statements."""
    query_log.clear()
    return {"message": "Query log cleared successfully"}
