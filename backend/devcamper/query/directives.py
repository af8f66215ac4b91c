"""
DevCamper API - List Directives
===============================

What:  Reads the control parameters of a list request.

    select=name,description        → selected fields, in order
    sort=-averageCost,name         → (averageCost, desc), (name, asc)
    page=2&limit=10                → page 2, 10 per page

Defaults: all fields, newest first (`-createdAt`), page 1, 25 per page.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Tuple

from devcamper.query.filters import RawQuery
from devcamper.query.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, positive_int


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortKey:
    field: str
    direction: SortDirection = SortDirection.ASC


DEFAULT_SORT: Tuple[SortKey, ...] = (SortKey("createdAt", SortDirection.DESC),)


@dataclass(frozen=True)
class ListDirectives:
    selected_fields: Tuple[str, ...] = ()
    sort_keys: Tuple[SortKey, ...] = DEFAULT_SORT
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT


def parse_directives(raw: RawQuery) -> ListDirectives:
    """Derive ListDirectives from the control keys of a RawQuery."""
    sort_keys = tuple(
        key for key in (_sort_key(token) for token in _csv(raw.get("sort"))) if key.field
    )
    return ListDirectives(
        selected_fields=tuple(_csv(raw.get("select"))),
        sort_keys=sort_keys or DEFAULT_SORT,
        page=positive_int(_first(raw.get("page")), DEFAULT_PAGE),
        limit=positive_int(_first(raw.get("limit")), DEFAULT_LIMIT),
    )


def _csv(value: Any) -> List[str]:
    if value is None or isinstance(value, Mapping):
        return []
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    return [token.strip() for token in str(value).split(",") if token.strip()]


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _sort_key(token: str) -> SortKey:
    if token.startswith("-"):
        return SortKey(token[1:].strip(), SortDirection.DESC)
    return SortKey(token.lstrip("+").strip(), SortDirection.ASC)
