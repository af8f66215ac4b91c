"""
DevCamper API - List Pipeline
=============================

What:  One reusable operation behind every list endpoint:
       raw query parameters in, one page of entities plus pagination out.

Steps (each uses only the previous step's output):
    1. parse_directives()  → ListDirectives (select/sort/page/limit + defaults)
    2. translate()         → FilterPredicate from the remaining keys
    3. COUNT(*) of the rows matching the predicate
    4. shape() + paginate() → BoundedQuery, PaginationMetadata
    5. execute BoundedQuery (relationships in `entity.expand` eager-loaded)
    6. ListResult(items, count=len(items), total, pagination)

Count and fetch run one after the other on the same session. Storage faults
surface as DatabaseError; nothing is retried here.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.exceptions import DatabaseError
from devcamper.query.directives import ListDirectives, parse_directives
from devcamper.query.fields import QueryableEntity
from devcamper.query.filters import CONTROL_KEYS, FilterPredicate, RawQuery, translate
from devcamper.query.pagination import PaginationMetadata, paginate
from devcamper.query.shaper import shape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListResult:
    """
    Attributes:
        items:      Entities on this page, in sort order
        total:      Rows matching the filter, ignoring pagination
        pagination: next/prev page links
        projection: Output fields requested by `select` (empty = all)
    """

    items: Tuple[Any, ...]
    total: int
    pagination: PaginationMetadata
    projection: Tuple[str, ...] = ()

    @property
    def count(self) -> int:
        return len(self.items)


class ListPipeline:
    """List query pipeline bound to one QueryableEntity."""

    def __init__(self, entity: QueryableEntity):
        self.entity = entity

    def plan(self, raw: RawQuery) -> Tuple[ListDirectives, FilterPredicate]:
        directives = parse_directives(raw)
        predicate = translate(raw, CONTROL_KEYS)
        return directives, predicate

    async def list(self, db: AsyncSession, raw: RawQuery) -> ListResult:
        """
        Run the pipeline for one request.

        Raises:
            ValidationError: a filter value cannot be cast to its field's type
            DatabaseError:   the count or the fetch failed
        """
        directives, predicate = self.plan(raw)

        # Built before any I/O so that bad filter values fail fast
        shaped = shape(self.entity, predicate, directives)

        try:
            total = (await db.execute(self.entity.count_statement(predicate))).scalar_one()
            bounded, pagination = paginate(shaped, directives.page, directives.limit, total)
            result = await db.execute(bounded.statement)
            items: List[Any] = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("%s list query failed: %s", self.entity.name, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Could not retrieve {self.entity.name.lower()}s. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.debug(
            "%s list: %d filters, page=%d limit=%d, %d of %d rows",
            self.entity.name,
            len(predicate),
            directives.page,
            directives.limit,
            len(items),
            total,
        )
        return ListResult(
            items=tuple(items),
            total=total,
            pagination=pagination,
            projection=shaped.projection,
        )
