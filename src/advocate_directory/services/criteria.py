"""Search request parsing and the filter criteria both stores interpret.

A request arrives as raw query-string values. ``parse_search_params`` turns it
into a :class:`SearchQuery`: a conjunction of criteria, a sort spec and the
pagination window. Each criterion is one of three variants:

- :class:`TextMatch` -- case-insensitive substring match against any of several fields
- :class:`TagMatch` -- any specialty tag contains any of the requested terms
- :class:`RangeMatch` -- inclusive numeric bounds on one field

Records pass a query only if they pass every criterion; the OR lives inside
the individual criterion.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Final, Union

from advocate_directory.core.errors import ValidationError
from advocate_directory.data.records import AdvocateRecord

DEFAULT_PAGE_SIZE: Final = 20
MAX_PAGE_SIZE: Final = 100

# Public (camelCase) sort names mapped to record attributes.
SORT_FIELDS: Final[dict[str, str]] = {
    "firstName": "first_name",
    "lastName": "last_name",
    "city": "city",
    "yearsOfExperience": "years_of_experience",
    "createdAt": "created_at",
}
DEFAULT_SORT_FIELD: Final = "createdAt"
DEFAULT_SORT_ORDER: Final = "desc"
SORT_ORDERS: Final = frozenset({"asc", "desc"})

# Largest value a 64-bit SQL INTEGER parameter can carry.
MAX_SQL_INTEGER: Final = 2**63 - 1

# Sorts whose order agrees with id order, so an id cursor lines up with the page.
CURSOR_ALIGNED_SORTS: Final = frozenset({"createdAt"})

SEARCH_FIELDS: Final = (
    "first_name",
    "last_name",
    "city",
    "degree",
    "phone_number",
    "specialties",
)


@dataclass(frozen=True)
class TextMatch:
    """Term must appear in at least one of ``fields``."""

    fields: tuple[str, ...]
    term: str


@dataclass(frozen=True)
class TagMatch:
    """At least one specialty tag must contain at least one of ``terms``."""

    terms: tuple[str, ...]


@dataclass(frozen=True)
class RangeMatch:
    """``minimum <= value <= maximum``; a missing bound is open."""

    field: str
    minimum: int | None = None
    maximum: int | None = None


Criterion = Union[TextMatch, TagMatch, RangeMatch]


@dataclass(frozen=True)
class SortSpec:
    """Sort field (public name) and direction."""

    field: str = DEFAULT_SORT_FIELD
    order: str = DEFAULT_SORT_ORDER

    @property
    def attribute(self) -> str:
        return SORT_FIELDS[self.field]

    @property
    def descending(self) -> bool:
        return self.order == "desc"

    @property
    def cursor_aligned(self) -> bool:
        return self.field in CURSOR_ALIGNED_SORTS


@dataclass(frozen=True)
class SearchQuery:
    """Validated search request."""

    criteria: tuple[Criterion, ...] = ()
    sort: SortSpec = field(default_factory=SortSpec)
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    cursor: int | None = None
    search: str | None = None
    filters: tuple[tuple[str, Any], ...] = ()

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def cache_key(self) -> tuple[Any, ...]:
        """Hashable identity of everything that affects the result."""
        return (self.criteria, self.sort, self.page, self.limit, self.cursor)

    def filter_summary(self) -> dict[str, Any]:
        """Active filters keyed by their public parameter names."""
        return {name: value for name, value in self.filters}


def _text_param(params: Mapping[str, str | None], name: str) -> str | None:
    raw = params.get(name)
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


def _int_param(
    params: Mapping[str, str | None], name: str, *, bounded: bool = True
) -> int | None:
    raw = _text_param(params, name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(name, f"{name} must be an integer", received=raw) from None
    if bounded and abs(value) > MAX_SQL_INTEGER:
        raise ValidationError(name, f"{name} is out of range", received=raw)
    return value


def _split_terms(raw: str) -> tuple[str, ...]:
    return tuple(term.strip() for term in raw.split(",") if term.strip())


def parse_search_params(
    params: Mapping[str, str | None],
    *,
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> SearchQuery:
    """Validate raw query-string values and build a :class:`SearchQuery`.

    Args:
        params: Raw parameter values keyed by public name; missing keys,
            ``None`` and blank strings all mean "not given".
        default_limit: Page size used when ``limit`` is absent.
        max_limit: Upper clamp for ``limit``.

    Returns:
        The parsed query.

    Raises:
        ValidationError: If a numeric parameter is not an integer, a
            cursor, experience bound or page offset does not fit a 64-bit
            SQL integer, or ``minExperience`` exceeds ``maxExperience``.
    """
    page = _int_param(params, "page", bounded=False)
    page = max(1, page) if page is not None else 1

    limit = _int_param(params, "limit", bounded=False)
    limit = default_limit if limit is None else limit
    limit = min(max_limit, max(1, limit))
    if (page - 1) * limit > MAX_SQL_INTEGER:
        raise ValidationError("page", "page is out of range", received=page)

    min_experience = _int_param(params, "minExperience")
    max_experience = _int_param(params, "maxExperience")
    if (
        min_experience is not None
        and max_experience is not None
        and min_experience > max_experience
    ):
        raise ValidationError(
            "minExperience",
            "minExperience must be less than or equal to maxExperience",
            received={"minExperience": min_experience, "maxExperience": max_experience},
        )

    cursor = _int_param(params, "cursor")

    criteria: list[Criterion] = []
    filters: list[tuple[str, Any]] = []

    search = _text_param(params, "search")
    if search is not None:
        criteria.append(TextMatch(SEARCH_FIELDS, search))

    city = _text_param(params, "city")
    if city is not None:
        criteria.append(TextMatch(("city",), city))
        filters.append(("city", city))

    degree = _text_param(params, "degree")
    if degree is not None:
        criteria.append(TextMatch(("degree",), degree))
        filters.append(("degree", degree))

    specialties = _text_param(params, "specialties")
    terms = _split_terms(specialties) if specialties is not None else ()
    if terms:
        criteria.append(TagMatch(terms))
        filters.append(("specialties", list(terms)))

    if min_experience is not None or max_experience is not None:
        criteria.append(RangeMatch("years_of_experience", min_experience, max_experience))
        if min_experience is not None:
            filters.append(("minExperience", min_experience))
        if max_experience is not None:
            filters.append(("maxExperience", max_experience))

    sort_field = _text_param(params, "sortBy")
    if sort_field not in SORT_FIELDS:
        sort_field = DEFAULT_SORT_FIELD
    sort_order = (_text_param(params, "sortOrder") or "").lower()
    if sort_order not in SORT_ORDERS:
        sort_order = DEFAULT_SORT_ORDER

    return SearchQuery(
        criteria=tuple(criteria),
        sort=SortSpec(sort_field, sort_order),
        page=page,
        limit=limit,
        cursor=cursor,
        search=search,
        filters=tuple(filters),
    )


def _field_contains(record: AdvocateRecord, field_name: str, needle: str) -> bool:
    if field_name == "specialties":
        return any(needle in tag.lower() for tag in record.specialties)
    value = getattr(record, field_name)
    if value is None:
        return False
    return needle in str(value).lower()


def matches(record: AdvocateRecord, criterion: Criterion) -> bool:
    """Return True if ``record`` satisfies a single criterion."""
    if isinstance(criterion, TextMatch):
        needle = criterion.term.lower()
        return any(_field_contains(record, name, needle) for name in criterion.fields)
    if isinstance(criterion, TagMatch):
        needles = [term.lower() for term in criterion.terms]
        return any(needle in tag.lower() for needle in needles for tag in record.specialties)
    if isinstance(criterion, RangeMatch):
        value = getattr(record, criterion.field)
        if criterion.minimum is not None and value < criterion.minimum:
            return False
        if criterion.maximum is not None and value > criterion.maximum:
            return False
        return True
    raise TypeError(f"Unsupported criterion: {criterion!r}")


def matches_all(record: AdvocateRecord, criteria: Iterable[Criterion]) -> bool:
    """Return True if ``record`` satisfies every criterion."""
    return all(matches(record, criterion) for criterion in criteria)


def _sort_value(value: Any) -> tuple[Any, ...]:
    if value is None:
        return (0,)
    if isinstance(value, str):
        # Case-folded first so "adams" sorts next to "Adams", raw value breaks ties.
        return (1, value.casefold(), value)
    return (1, value)


def sort_records(records: Sequence[AdvocateRecord], sort: SortSpec) -> list[AdvocateRecord]:
    """Order records by ``sort`` with ``id`` as a same-direction tiebreaker."""
    return sorted(
        records,
        key=lambda record: (_sort_value(getattr(record, sort.attribute)), record.id or 0),
        reverse=sort.descending,
    )
