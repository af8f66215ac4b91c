"""
DevCamper API - Filter Translator Unit Tests
============================================

What we test:
    ✅ Control keys never become filter conditions
    ✅ field[op] keys map to comparison operators
    ✅ Unknown nested tokens stay literal equality values
    ✅ Repeated query keys become lists
    ✅ The input RawQuery is never modified
"""

import pytest

from devcamper.query.filters import (
    CONTROL_KEYS,
    Condition,
    Operator,
    raw_query_from_items,
    split_key,
    translate,
)


class TestTranslate:
    def test_empty_query_gives_empty_predicate(self):
        """An empty query produces no conditions."""
        assert translate({}).is_empty

    def test_control_keys_only_gives_empty_predicate(self):
        """select/sort/page/limit are directives, never filters."""
        raw = {"select": "name,description", "sort": "-averageCost", "page": "2", "limit": "10"}
        predicate = translate(raw)
        assert predicate.is_empty
        assert len(predicate) == 0

    def test_control_key_with_operator_is_still_excluded(self):
        """page[gt] is excluded by its base name."""
        assert translate({"page[gt]": "2"}).is_empty

    @pytest.mark.parametrize("token", ["gt", "gte", "lt", "lte", "in"])
    def test_bracket_operator(self, token):
        """field[op]=value becomes a condition with that operator."""
        predicate = translate({f"averageCost[{token}]": "10000"})
        assert list(predicate) == [Condition("averageCost", Operator(token), "10000")]

    @pytest.mark.parametrize("token", ["gt", "gte", "lt", "lte", "in"])
    def test_nested_mapping_operator(self, token):
        """A pre-parsed {"op": value} mapping is read the same way."""
        predicate = translate({"averageCost": {token: "10000"}})
        (condition,) = predicate
        assert condition.field == "averageCost"
        assert condition.operator is Operator(token)
        assert condition.value == "10000"

    def test_flat_key_is_equality(self):
        """A plain key is an equality condition."""
        assert list(translate({"housing": "true"})) == [Condition("housing", Operator.EQ, "true")]

    def test_unknown_nested_token_is_literal(self):
        """location[state]=MA compares against the mapping {"state": "MA"}."""
        (condition,) = translate({"location[state]": "MA"})
        assert condition.field == "location"
        assert condition.operator is Operator.EQ
        assert dict(condition.value) == {"state": "MA"}

    def test_operator_words_outside_brackets_are_not_rewritten(self):
        """Operator words inside names or values stay untouched."""
        predicate = translate({"ingtest": "in", "title[lte]": "gt"})
        assert list(predicate) == [
            Condition("ingtest", Operator.EQ, "in"),
            Condition("title", Operator.LTE, "gt"),
        ]

    def test_partial_operator_token_is_literal(self):
        """gtx is not an operator, so it stays a literal key."""
        (condition,) = translate({"averageCost[gtx]": "5"})
        assert condition.operator is Operator.EQ
        assert dict(condition.value) == {"gtx": "5"}

    def test_mixed_mapping_keeps_operators_and_literal(self):
        """Operator keys and literal keys in one mapping give separate conditions."""
        predicate = translate({"averageCost": {"gte": "100", "currency": "usd"}})
        operators = [c.operator for c in predicate]
        assert operators == [Operator.GTE, Operator.EQ]
        assert dict(predicate.conditions[1].value) == {"currency": "usd"}

    def test_list_value_is_kept_as_tuple(self):
        """Repeated values arrive as a tuple."""
        (condition,) = translate({"careers": ["Business", "UI/UX"]})
        assert condition.value == ("Business", "UI/UX")

    def test_empty_brackets_are_equality(self):
        """careers[]=... is equality on careers."""
        (condition,) = translate({"careers[]": ["Business", "Other"]})
        assert condition.operator is Operator.EQ
        assert condition.value == ("Business", "Other")

    def test_input_is_not_modified(self):
        """Translating twice leaves the raw query as it was."""
        raw = {"averageCost[lte]": "10000", "select": "name", "careers": ["A", "B"]}
        snapshot = {"averageCost[lte]": "10000", "select": "name", "careers": ["A", "B"]}
        translate(raw)
        translate(raw)
        assert raw == snapshot

    def test_custom_excluded_keys(self):
        """Callers may pass their own excluded key set."""
        predicate = translate({"name": "x", "housing": "true"}, excluded_keys={"name"})
        assert [c.field for c in predicate] == ["housing"]

    def test_default_excluded_keys_are_the_control_keys(self):
        """The default exclusions are exactly the four directives."""
        assert CONTROL_KEYS == {"select", "sort", "page", "limit"}


class TestRawQueryFromItems:
    def test_single_values(self):
        """A key seen once maps to its string value."""
        assert raw_query_from_items([("a", "1"), ("b", "2")]) == {"a": "1", "b": "2"}

    def test_repeated_keys_become_lists(self):
        """A key seen several times maps to its values in order."""
        raw = raw_query_from_items([("careers", "Business"), ("careers", "Other"), ("careers", "UI/UX")])
        assert raw == {"careers": ["Business", "Other", "UI/UX"]}


class TestSplitKey:
    def test_split_key(self):
        """Only a single trailing [token] is split off."""
        assert split_key("averageCost[lte]") == ("averageCost", "lte")
        assert split_key("name") == ("name", None)
        assert split_key("a[b][c]") == ("a[b][c]", None)
