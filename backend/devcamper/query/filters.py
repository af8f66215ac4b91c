"""
DevCamper API - Filter Translator
=================================

What:  Turns user-supplied query parameters into a structured FilterPredicate.
How:   A walk over the parsed RawQuery. Keys written as `field[op]` (or a
       nested mapping value `{op: value}`) become comparison conditions when
       `op` is one of gt, gte, lt, lte, in. Every other key is an equality
       condition on the field.

Examples:
    ?averageCost[lte]=10000          → (averageCost, lte, "10000")
    ?careers[in]=Business            → (careers, in, "Business")
    ?housing=true                    → (housing, eq, "true")
    ?location[state]=MA              → (location, eq, {"state": "MA"})

The translator never raises and never casts values; casting to the column
type happens when the predicate is applied to a query (see fields.py).
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import (
    AbstractSet,
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

RawValue = Union[str, List[str], Mapping[str, Any]]
RawQuery = Mapping[str, RawValue]

# Directive keys that shape the result instead of filtering it
CONTROL_KEYS = frozenset({"select", "sort", "page", "limit"})

_NESTED_KEY = re.compile(r"^(?P<field>[^\[\]]+)\[(?P<inner>[^\[\]]*)\]$")


class Operator(str, Enum):
    EQ = "eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"


# The only nested keys rewritten into comparisons
OPERATOR_KEYWORDS: Dict[str, Operator] = {
    "gt": Operator.GT,
    "gte": Operator.GTE,
    "lt": Operator.LT,
    "lte": Operator.LTE,
    "in": Operator.IN,
}


@dataclass(frozen=True)
class Condition:
    field: str
    operator: Operator
    value: Any


@dataclass(frozen=True)
class FilterPredicate:
    """An immutable, ordered set of conditions that must all hold."""

    conditions: Tuple[Condition, ...] = ()

    def __iter__(self) -> Iterator[Condition]:
        return iter(self.conditions)

    def __len__(self) -> int:
        return len(self.conditions)

    @property
    def is_empty(self) -> bool:
        return not self.conditions


def raw_query_from_items(items: Iterable[Tuple[str, str]]) -> Dict[str, RawValue]:
    """
    Build a RawQuery from (name, value) pairs as they appear in a query string.

    A name that appears more than once maps to the list of its values, in order.
    """
    raw: Dict[str, RawValue] = {}
    for key, value in items:
        if key not in raw:
            raw[key] = value
            continue
        existing = raw[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            raw[key] = [existing, value]
    return raw


def split_key(key: str) -> Tuple[str, Optional[str]]:
    """Split `field[inner]` into (field, inner); plain keys give (key, None)."""
    match = _NESTED_KEY.match(key)
    if match is None:
        return key, None
    return match.group("field"), match.group("inner")


def translate(
    raw: RawQuery,
    excluded_keys: AbstractSet[str] = CONTROL_KEYS,
) -> FilterPredicate:
    """
    Translate a RawQuery into a FilterPredicate.

    Args:
        raw:           Query parameters; not modified.
        excluded_keys: Outer keys to drop (the list directives by default).

    Returns:
        FilterPredicate, empty when no data filters remain.
    """
    conditions: List[Condition] = []
    for key, value in raw.items():
        field, inner = split_key(str(key))
        if field in excluded_keys:
            continue
        if inner is not None:
            conditions.append(_nested_condition(field, inner, value))
        elif isinstance(value, Mapping):
            conditions.extend(_mapping_conditions(field, value))
        else:
            conditions.append(Condition(field, Operator.EQ, _freeze(value)))
    return FilterPredicate(tuple(conditions))


def _nested_condition(field: str, inner: str, value: Any) -> Condition:
    operator = OPERATOR_KEYWORDS.get(inner)
    if operator is not None:
        return Condition(field, operator, _freeze(value))
    if inner == "":
        # field[]=a&field[]=b
        return Condition(field, Operator.EQ, _freeze(value))
    return Condition(field, Operator.EQ, _freeze({inner: value}))


def _mapping_conditions(field: str, value: Mapping[str, Any]) -> List[Condition]:
    conditions: List[Condition] = []
    literal: Dict[str, Any] = {}
    for inner, inner_value in value.items():
        operator = OPERATOR_KEYWORDS.get(str(inner))
        if operator is None:
            literal[str(inner)] = inner_value
        else:
            conditions.append(Condition(field, operator, _freeze(inner_value)))
    if literal:
        conditions.append(Condition(field, Operator.EQ, _freeze(literal)))
    return conditions


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value
