"""
DevCamper API - Pagination Calculator
=====================================

What:  Offset pagination for list endpoints.
How:   page/limit → PageWindow(start_index, end_index). The window decides
       whether next/prev pages exist; the storage query itself skips
       `start_index` rows and takes `limit` rows.

    total=57, limit=25
    page 1 → window [0, 25)   next={2, 25}
    page 2 → window [25, 50)  next={3, 25}  prev={1, 25}
    page 3 → window [50, 75)                prev={2, 25}
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

if TYPE_CHECKING:
    from devcamper.query.shaper import BoundedQuery, ShapedQuery

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25

# page * limit must fit a signed 64-bit OFFSET, so each is capped at 2**31 - 1
MAX_PAGE_VALUE = 2**31 - 1

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def positive_int(value: Any, default: int) -> int:
    """
    Parse a page/limit value the way `parseInt(value, 10)` reads it.

        "2.5" → 2     "10abc" → 10     "abc" → default     "0" → default

    Values above MAX_PAGE_VALUE are capped to it.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        number = value
    else:
        match = _LEADING_INT.match(str(value))
        if match is None:
            return default
        number = int(match.group(1))
    if number < 1:
        return default
    return min(number, MAX_PAGE_VALUE)


@dataclass(frozen=True)
class PageWindow:
    start_index: int
    end_index: int

    @classmethod
    def for_page(cls, page: int, limit: int) -> "PageWindow":
        return cls(start_index=(page - 1) * limit, end_index=page * limit)


@dataclass(frozen=True)
class PageRef:
    page: int
    limit: int


@dataclass(frozen=True)
class PaginationMetadata:
    next: Optional[PageRef] = None
    prev: Optional[PageRef] = None

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        """JSON shape: only the links that exist, e.g. {"next": {"page": 2, "limit": 25}}."""
        result: Dict[str, Dict[str, int]] = {}
        if self.next is not None:
            result["next"] = {"page": self.next.page, "limit": self.next.limit}
        if self.prev is not None:
            result["prev"] = {"page": self.prev.page, "limit": self.prev.limit}
        return result


def pagination_metadata(page: Any, limit: Any, total: int) -> Tuple[PageWindow, PaginationMetadata]:
    """Compute the window and next/prev links for one page of `total` records."""
    page = positive_int(page, DEFAULT_PAGE)
    limit = positive_int(limit, DEFAULT_LIMIT)
    window = PageWindow.for_page(page, limit)
    if total <= 0:
        return window, PaginationMetadata()

    next_ref = PageRef(page + 1, limit) if window.end_index < total else None
    prev_ref = PageRef(page - 1, limit) if window.start_index > 0 else None
    return window, PaginationMetadata(next=next_ref, prev=prev_ref)


def paginate(
    shaped: "ShapedQuery",
    page: Any,
    limit: Any,
    total: int,
) -> Tuple["BoundedQuery", PaginationMetadata]:
    """
    Narrow a shaped query to one page.

    Returns:
        (BoundedQuery skipping start_index rows and taking at most limit rows,
         PaginationMetadata)
    """
    window, metadata = pagination_metadata(page, limit, total)
    bounded = shaped.bounded(skip=window.start_index, take=window.end_index - window.start_index)
    return bounded, metadata
