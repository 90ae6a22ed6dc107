"""Search analytics endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from advocate_directory.api.v1.dependencies import SearchAnalyticsDep, bounded_int
from advocate_directory.core.errors import ValidationError

router = APIRouter(prefix="/analytics", tags=["analytics"])

ANALYTICS_TYPES = ("stats", "popular", "suggestions", "recent")


@router.get("")
def get_analytics(
    analytics: SearchAnalyticsDep,
    type_: str = Query("stats", alias="type", description="stats, popular, suggestions or recent"),
    limit: str | None = Query(None),
    prefix: str | None = Query(None),
    time_range: str | None = Query(None, alias="timeRange", description="Restrict stats to the last N hours"),
) -> Any:
    """Return aggregated search analytics.

    Args:
        analytics: Search analytics sink
        type_: Which view to return
        limit: Maximum number of entries for list views
        prefix: Query prefix for suggestions (at least two characters)
        time_range: Hours of history to include in ``stats``

    Returns:
        The requested analytics view

    Raises:
        ValidationError: If the view type or one of its parameters is invalid
    """
    if type_ == "stats":
        hours = None
        if time_range is not None and time_range.strip():
            hours = bounded_int("timeRange", time_range, 24, 1, 24 * 365)
        return analytics.stats(hours)

    if type_ == "popular":
        count = bounded_int("limit", limit, 20, 1, 100)
        return [item.to_dict() for item in analytics.popular(count)]

    if type_ == "suggestions":
        if prefix is None or len(prefix.strip()) < 2:
            raise ValidationError(
                "prefix", "Prefix must be at least 2 characters long", received=prefix
            )
        count = bounded_int("limit", limit, 10, 1, 50)
        return analytics.suggestions(prefix, count)

    if type_ == "recent":
        count = bounded_int("limit", limit, 100, 1, 1000)
        return [event.to_dict() for event in analytics.recent(count)]

    raise ValidationError(
        "type",
        f"Invalid type parameter. Use one of: {', '.join(ANALYTICS_TYPES)}",
        received=type_,
    )


@router.delete("")
def clear_analytics(analytics: SearchAnalyticsDep) -> dict[str, str]:
    """Forget all recorded searches."""
    analytics.clear()
    return {"message": "Search analytics cleared successfully"}
