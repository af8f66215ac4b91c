"""
DevCamper API - Queryable Fields
================================

What:  Per-entity registry mapping API field names to ORM attributes, and the
       translation of FilterPredicate conditions into SQL clauses.
How:   A QueryableEntity lists the fields clients may filter, sort and
       select on. Names the registry does not know are skipped (and logged at
       DEBUG), the same way a schema-strict ODM drops unknown query paths.

Value handling when a condition is applied:
    - Values are cast to the column's Python type (bool, int, float,
      datetime, UUID, str); a value that cannot be cast → ValidationError.
    - `in` takes a list, or a comma-separated string.
    - Equality with a list value means "any of these values".
    - A nested literal (`location[state]=MA`) never equals a scalar column.
    - Array fields (careers) match when any element satisfies the condition.
"""

import logging
import operator as op
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from sqlalchemy import ColumnElement, and_, asc, desc, false, func, select, true
from sqlalchemy.orm import InstrumentedAttribute

from devcamper.exceptions import ValidationError
from devcamper.query.directives import SortDirection, SortKey
from devcamper.query.filters import Condition, FilterPredicate, Operator

logger = logging.getLogger(__name__)

_COMPARATORS: Dict[Operator, Callable[[Any, Any], Any]] = {
    Operator.EQ: op.eq,
    Operator.GT: op.gt,
    Operator.GTE: op.ge,
    Operator.LT: op.lt,
    Operator.LTE: op.le,
}

_TRUE_WORDS = {"1", "true", "yes", "y", "on"}
_FALSE_WORDS = {"0", "false", "no", "n", "off"}


def _python_type(column: InstrumentedAttribute) -> Optional[type]:
    try:
        return column.expression.type.python_type
    except NotImplementedError:
        return None


def coerce_value(name: str, column: InstrumentedAttribute, value: Any) -> Any:
    """Cast a query-string value to the Python type of `column`."""
    python_type = _python_type(column)
    if python_type is None or value is None or isinstance(value, python_type):
        return value
    text = str(value).strip()
    try:
        if python_type is bool:
            lowered = text.lower()
            if lowered in _TRUE_WORDS:
                return True
            if lowered in _FALSE_WORDS:
                return False
            raise ValueError(text)
        if python_type is int:
            return int(text)
        if python_type is float:
            return float(text)
        if python_type is uuid.UUID:
            return uuid.UUID(text)
        if python_type is datetime:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
        if python_type is date:
            return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(
            message=f"Invalid value '{value}' for field {name}",
            field=name,
            context={"value": str(value), "expected": python_type.__name__},
        )
    return text


def _members(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [token for token in str(value).split(",") if token != ""]


def compare(name: str, column: InstrumentedAttribute, condition: Condition) -> ColumnElement:
    """Build the SQL clause for one condition on a plain column."""
    value = condition.value
    if isinstance(value, Mapping):
        return false()

    if condition.operator is Operator.IN or (
        condition.operator is Operator.EQ and isinstance(value, (list, tuple))
    ):
        if any(isinstance(member, Mapping) for member in _members(value)):
            return false()
        return column.in_([coerce_value(name, column, member) for member in _members(value)])

    if isinstance(value, (list, tuple)):
        raise ValidationError(
            message=f"Invalid value for field {name}: expected a single value",
            field=name,
        )
    return _COMPARATORS[condition.operator](column, coerce_value(name, column, value))


@dataclass(frozen=True)
class ArrayField:
    """A multi-valued field stored as child rows (relationship + element column)."""

    relationship: InstrumentedAttribute
    element: InstrumentedAttribute

    def clause(self, name: str, condition: Condition) -> ColumnElement:
        return self.relationship.any(compare(name, self.element, condition))


FilterField = Union[InstrumentedAttribute, ArrayField]


@dataclass(frozen=True)
class QueryableEntity:
    """
    What a list endpoint may filter, sort, select and expand for one model.

    Attributes:
        name:     Resource name used in error messages ("Bootcamp")
        model:    ORM class
        columns:  API name → column; filterable and sortable. Names without a
                  dot are also selectable, and their output key is the
                  column's attribute name.
        arrays:   API name → ArrayField; filterable and selectable
        groups:   Output field → columns it is built from ("location")
        expand:   Relationships loaded with every row (eager selectin)
        required: Columns always loaded even under a projection
    """

    name: str
    model: type
    columns: Mapping[str, InstrumentedAttribute]
    arrays: Mapping[str, ArrayField] = field(default_factory=dict)
    groups: Mapping[str, Tuple[InstrumentedAttribute, ...]] = field(default_factory=dict)
    expand: Tuple[InstrumentedAttribute, ...] = ()
    required: Tuple[InstrumentedAttribute, ...] = ()

    @property
    def id_column(self) -> InstrumentedAttribute:
        return self.model.id

    def filter_field(self, name: str) -> Optional[FilterField]:
        if name in self.arrays:
            return self.arrays[name]
        return self.columns.get(name)

    def clauses(self, predicate: FilterPredicate) -> List[ColumnElement]:
        """SQL clauses for every condition on a known field."""
        clauses: List[ColumnElement] = []
        for condition in predicate:
            target = self.filter_field(condition.field)
            if target is None:
                logger.debug("%s: ignoring filter on unknown field '%s'", self.name, condition.field)
                continue
            if isinstance(target, ArrayField):
                clauses.append(target.clause(condition.field, condition))
            else:
                clauses.append(compare(condition.field, target, condition))
        return clauses

    def where(self, predicate: FilterPredicate) -> ColumnElement:
        clauses = self.clauses(predicate)
        return and_(*clauses) if clauses else true()

    def count_statement(self, predicate: FilterPredicate):
        return select(func.count()).select_from(self.model).where(self.where(predicate))

    def order_by(self, sort_keys: Tuple[SortKey, ...]) -> List[ColumnElement]:
        """ORDER BY terms for the known sort keys, then the id as tie-breaker."""
        terms: List[ColumnElement] = []
        for key in sort_keys:
            column = self.columns.get(key.field)
            if column is None:
                logger.debug("%s: ignoring sort on unknown field '%s'", self.name, key.field)
                continue
            terms.append(desc(column) if key.direction is SortDirection.DESC else asc(column))
        terms.append(asc(self.id_column))
        return terms

    def projection(self, selected: Tuple[str, ...]) -> Tuple[Tuple[str, ...], Tuple[InstrumentedAttribute, ...]]:
        """
        Resolve `select` names.

        Returns:
            (output field names, columns to load); both empty when nothing
            selectable was requested, meaning "all fields".
        """
        outputs: List[str] = []
        columns: Dict[str, InstrumentedAttribute] = {}
        for name in selected:
            top = name.split(".", 1)[0]
            if top in self.groups:
                output, needed = top, self.groups[top]
            elif top in self.arrays:
                output, needed = top, ()
            elif top in self.columns:
                output, needed = self.columns[top].key, (self.columns[top],)
            else:
                logger.debug("%s: ignoring select of unknown field '%s'", self.name, name)
                continue
            if output not in outputs:
                outputs.append(output)
            columns.update((c.key, c) for c in needed)
        if not outputs:
            return (), ()
        columns.update((c.key, c) for c in self.required)
        return tuple(outputs), tuple(columns.values())
