"""
DevCamper API - List Query Pipeline
===================================

    RawQuery ──▶ Filter Translator ──▶ FilterPredicate ─┐
        │                                              ├──▶ Query Shaper ──▶ Pagination ──▶ storage
        └──────▶ parse_directives ──▶ ListDirectives ──┘

Usage:
    pipeline = ListPipeline(BOOTCAMPS)
    result = await pipeline.list(db, raw_query_from_items(request.query_params.multi_items()))
"""

from devcamper.query.directives import (
    DEFAULT_SORT,
    ListDirectives,
    SortDirection,
    SortKey,
    parse_directives,
)
from devcamper.query.fields import ArrayField, QueryableEntity
from devcamper.query.filters import (
    CONTROL_KEYS,
    Condition,
    FilterPredicate,
    Operator,
    RawQuery,
    raw_query_from_items,
    translate,
)
from devcamper.query.pagination import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_PAGE_VALUE,
    PageRef,
    PageWindow,
    PaginationMetadata,
    paginate,
    pagination_metadata,
)
from devcamper.query.pipeline import ListPipeline, ListResult
from devcamper.query.shaper import BoundedQuery, ShapedQuery, shape

__all__ = [
    "ArrayField",
    "BoundedQuery",
    "CONTROL_KEYS",
    "Condition",
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "DEFAULT_SORT",
    "FilterPredicate",
    "ListDirectives",
    "ListPipeline",
    "ListResult",
    "MAX_PAGE_VALUE",
    "Operator",
    "PageRef",
    "PageWindow",
    "PaginationMetadata",
    "QueryableEntity",
    "RawQuery",
    "ShapedQuery",
    "SortDirection",
    "SortKey",
    "paginate",
    "pagination_metadata",
    "parse_directives",
    "raw_query_from_items",
    "shape",
    "translate",
]
