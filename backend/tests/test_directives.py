"""
DevCamper API - List Directives Unit Tests
==========================================

What we test:
    ✅ Defaults for an empty query: newest first, page 1, 25 per page
    ✅ select/sort parsing, including direction prefixes
    ✅ page/limit read their leading integer ("2.5" → 2)
    ✅ Invalid page/limit values fall back to the defaults
"""

import pytest

from devcamper.query.directives import (
    DEFAULT_SORT,
    ListDirectives,
    SortDirection,
    SortKey,
    parse_directives,
)
from devcamper.query.pagination import MAX_PAGE_VALUE


class TestParseDirectives:
    def test_empty_query_defaults(self):
        """No directives means newest first, page 1, 25 per page, every field."""
        directives = parse_directives({})
        assert directives == ListDirectives()
        assert directives.sort_keys == (SortKey("createdAt", SortDirection.DESC),)
        assert directives.page == 1
        assert directives.limit == 25
        assert directives.selected_fields == ()

    def test_select_keeps_order(self):
        """Selected fields keep the order they were given in."""
        directives = parse_directives({"select": "name,description,location"})
        assert directives.selected_fields == ("name", "description", "location")

    def test_select_ignores_blank_tokens(self):
        """Empty entries in select are dropped."""
        assert parse_directives({"select": "name,, ,slug"}).selected_fields == ("name", "slug")

    def test_multi_key_sort(self):
        """Each sort token keeps its own direction."""
        directives = parse_directives({"sort": "-averageCost,name"})
        assert directives.sort_keys == (
            SortKey("averageCost", SortDirection.DESC),
            SortKey("name", SortDirection.ASC),
        )

    def test_plus_prefix_is_ascending(self):
        """A leading + is ascending."""
        assert parse_directives({"sort": "+name"}).sort_keys == (SortKey("name"),)

    def test_blank_sort_uses_default(self):
        """An empty sort value keeps the default order."""
        assert parse_directives({"sort": ""}).sort_keys == DEFAULT_SORT

    @pytest.mark.parametrize("value", ["-", "+", "-,+", " - "])
    def test_bare_direction_prefix_uses_default(self, value):
        """A direction with no field name is dropped, leaving the default order."""
        assert parse_directives({"sort": value}).sort_keys == DEFAULT_SORT

    def test_bare_prefix_is_dropped_next_to_real_keys(self):
        """Only the empty token is dropped; named keys still apply."""
        assert parse_directives({"sort": "-,name"}).sort_keys == (SortKey("name"),)

    def test_repeated_select_values_are_joined(self):
        """Repeated select keys read as one comma list."""
        assert parse_directives({"select": ["name", "slug"]}).selected_fields == ("name", "slug")

    def test_page_and_limit(self):
        """Numeric page and limit are used as given."""
        directives = parse_directives({"page": "3", "limit": "10"})
        assert (directives.page, directives.limit) == (3, 10)

    def test_page_and_limit_use_leading_integer(self):
        """Trailing characters after the digits are ignored."""
        directives = parse_directives({"page": "2.5", "limit": "10abc"})
        assert (directives.page, directives.limit) == (2, 10)

    @pytest.mark.parametrize("value", ["abc", "0", "-2", "", "abc10", "0.9"])
    def test_invalid_page_falls_back(self, value):
        """Values with no leading integer of at least 1 fall back to page 1."""
        assert parse_directives({"page": value}).page == 1

    @pytest.mark.parametrize("value", ["abc", "0", "-1"])
    def test_invalid_limit_falls_back(self, value):
        """Values with no leading integer of at least 1 fall back to 25."""
        assert parse_directives({"limit": value}).limit == 25

    def test_huge_page_is_capped(self):
        """A page number beyond the cap is read as the cap."""
        assert parse_directives({"page": "100000000000000000000"}).page == MAX_PAGE_VALUE

    def test_repeated_page_uses_first(self):
        """The first of several page values wins."""
        assert parse_directives({"page": ["2", "5"]}).page == 2

    def test_filter_keys_do_not_affect_directives(self):
        """Filter keys leave the directives at their defaults."""
        assert parse_directives({"housing": "true", "averageCost[lte]": "1"}) == ListDirectives()
