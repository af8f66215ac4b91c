"""
DevCamper API - Query Shaper
============================

What:  Builds the deferred SELECT for a list request: filter, projection,
       relationship expansion and multi-key sort. Nothing is executed here;
       the pagination calculator narrows the result and the pipeline runs it.
"""

from dataclasses import dataclass
from typing import Tuple

from sqlalchemy import Select, select
from sqlalchemy.orm import load_only, selectinload

from devcamper.query.directives import ListDirectives
from devcamper.query.fields import QueryableEntity
from devcamper.query.filters import FilterPredicate


@dataclass(frozen=True)
class ShapedQuery:
    """
    A composable, not yet executed list query.

    Attributes:
        entity:     Registry the query was built from
        statement:  SELECT with WHERE, loader options and ORDER BY applied
        projection: Output field names to return; empty means all fields
    """

    entity: QueryableEntity
    statement: Select
    projection: Tuple[str, ...] = ()

    def bounded(self, skip: int, take: int) -> "BoundedQuery":
        return BoundedQuery(
            entity=self.entity,
            statement=self.statement.offset(skip).limit(take),
            projection=self.projection,
            skip=skip,
            take=take,
        )


@dataclass(frozen=True)
class BoundedQuery:
    """A shaped query narrowed to one page: skip `skip` rows, take at most `take`."""

    entity: QueryableEntity
    statement: Select
    projection: Tuple[str, ...]
    skip: int
    take: int


def shape(
    entity: QueryableEntity,
    predicate: FilterPredicate,
    directives: ListDirectives,
) -> ShapedQuery:
    """
    Apply field selection and sort order on top of a filter predicate.

    Raises:
        ValidationError: a filter value cannot be cast to its field's type.
    """
    statement = select(entity.model).where(entity.where(predicate))

    outputs, columns = entity.projection(directives.selected_fields)
    if columns:
        statement = statement.options(load_only(*columns))
    for relationship in entity.expand:
        statement = statement.options(selectinload(relationship))

    statement = statement.order_by(*entity.order_by(directives.sort_keys))
    return ShapedQuery(entity=entity, statement=statement, projection=outputs)
