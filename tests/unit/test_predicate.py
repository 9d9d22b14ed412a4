"""Unit tests for key condition construction."""

import io
from decimal import Decimal
from unittest.mock import Mock

import pytest

from dynamodb_query.predicate import (
    Comparison,
    QueryPredicate,
    allowed_comparisons,
    build_predicate,
    coerce_value,
)
from dynamodb_query.prompts import Prompter
from dynamodb_query.schema import KeySchema, ScalarType


def scripted_prompter(texts, selection="none"):
    prompter = Mock()
    prompter.text.side_effect = list(texts)
    prompter.select.return_value = selection
    return prompter


TYPES = {"pk": ScalarType.STRING, "sk": ScalarType.NUMBER, "name": ScalarType.STRING}


@pytest.mark.unit
class TestAllowedComparisons:

    def test_string_sort_key_offers_begins_with_last(self):
        comparisons = allowed_comparisons(ScalarType.STRING)

        assert [c.value for c in comparisons] == [
            "none", "=", "<", "<=", ">", ">=", "between", "begins_with"
        ]

    def test_number_sort_key_never_offers_begins_with(self):
        assert Comparison.BEGINS_WITH not in allowed_comparisons(ScalarType.NUMBER)

    def test_binary_sort_key_never_offers_begins_with(self):
        assert Comparison.BEGINS_WITH not in allowed_comparisons(ScalarType.BINARY)

    def test_arity(self):
        assert Comparison.NONE.arity == 0
        assert Comparison.GE.arity == 1
        assert Comparison.BEGINS_WITH.arity == 1
        assert Comparison.BETWEEN.arity == 2


@pytest.mark.unit
class TestCoerceValue:

    @pytest.mark.parametrize("raw, expected", [("100", 100), ("-3", -3), ("2.5", Decimal("2.5"))])
    def test_number(self, raw, expected):
        value = coerce_value(raw, ScalarType.NUMBER)

        assert isinstance(value, Decimal)
        assert value == expected

    def test_number_ignores_surrounding_whitespace(self):
        assert coerce_value(" 42 ", ScalarType.NUMBER) == 42

    @pytest.mark.parametrize("raw", ["abc", "", "NaN", "Infinity"])
    def test_non_numeric_raises(self, raw):
        with pytest.raises(ValueError):
            coerce_value(raw, ScalarType.NUMBER)

    @pytest.mark.parametrize("raw", ["cust#1", "100", "", " padded "])
    def test_string_is_identity(self, raw):
        assert coerce_value(raw, ScalarType.STRING) == raw

    @pytest.mark.parametrize("raw", ["1e500", "1e-200", "1" * 39])
    def test_number_outside_dynamodb_limits_raises(self, raw):
        with pytest.raises(ValueError, match="out of DynamoDB range"):
            coerce_value(raw, ScalarType.NUMBER)

    def test_number_at_dynamodb_precision_kept(self):
        assert coerce_value("1" * 38, ScalarType.NUMBER) == Decimal("1" * 38)

    def test_binary_is_utf8_bytes(self):
        assert coerce_value("abc", ScalarType.BINARY) == b"abc"


@pytest.mark.unit
class TestQueryPredicateRendering:

    def test_partition_only(self):
        predicate = QueryPredicate("pk", "cust#1")

        assert predicate.key_condition_expression == "#pk = :pk"
        assert predicate.attribute_names == {"#pk": "pk"}
        assert predicate.attribute_values == {":pk": "cust#1"}

    def test_none_comparison_drops_sort_key(self):
        predicate = QueryPredicate("pk", "cust#1", "sk", Comparison.NONE)

        assert predicate.key_condition_expression == "#pk = :pk"
        assert "#sk" not in predicate.attribute_names
        assert set(predicate.attribute_values) == {":pk"}

    @pytest.mark.parametrize("comparison", ["=", "<", "<=", ">", ">="])
    def test_single_value_comparisons(self, comparison):
        predicate = QueryPredicate("pk", "a", "sk", Comparison(comparison), (Decimal(1),))

        assert predicate.key_condition_expression == f"#pk = :pk and #sk {comparison} :sk"
        assert predicate.attribute_names == {"#pk": "pk", "#sk": "sk"}
        assert predicate.attribute_values == {":pk": "a", ":sk": 1}

    def test_begins_with(self):
        predicate = QueryPredicate("pk", "a", "name", Comparison.BEGINS_WITH, ("ord",))

        assert predicate.key_condition_expression == "#pk = :pk and begins_with(#sk, :sk)"
        assert predicate.attribute_values == {":pk": "a", ":sk": "ord"}

    def test_between(self):
        predicate = QueryPredicate(
            "pk", "cust#1", "ts", Comparison.BETWEEN, (Decimal(5), Decimal(10))
        )

        assert predicate.key_condition_expression == "#pk = :pk and #sk between :sk1 and :sk2"
        assert predicate.attribute_names == {"#pk": "pk", "#sk": "ts"}
        assert predicate.attribute_values == {":pk": "cust#1", ":sk1": 5, ":sk2": 10}


@pytest.mark.unit
class TestQueryPredicateArity:

    def test_single_value_comparison_with_two_values_raises(self):
        with pytest.raises(ValueError, match="takes 1"):
            QueryPredicate("pk", "a", "sk", Comparison.EQ, (1, 2))

    def test_between_with_one_value_raises(self):
        with pytest.raises(ValueError, match="takes 2"):
            QueryPredicate("pk", "a", "sk", Comparison.BETWEEN, (1,))

    def test_none_with_values_raises(self):
        with pytest.raises(ValueError):
            QueryPredicate("pk", "a", "sk", Comparison.NONE, (1,))

    def test_comparison_without_sort_key_raises(self):
        with pytest.raises(ValueError, match="requires a sort key"):
            QueryPredicate("pk", "a", None, Comparison.EQ, (1,))


@pytest.mark.unit
class TestBuildPredicate:

    def test_partition_only_schema_never_asks_for_comparison(self):
        prompter = scripted_prompter(["cust#1"])

        predicate = build_predicate(KeySchema("pk"), TYPES.__getitem__, prompter)

        assert predicate == QueryPredicate("pk", "cust#1")
        prompter.select.assert_not_called()
        prompter.text.assert_called_once_with("Partition key (pk)")

    def test_orders_greater_or_equal(self):
        prompter = scripted_prompter(["cust#1", "100"], selection=">=")

        predicate = build_predicate(KeySchema("pk", "sk"), TYPES.__getitem__, prompter)

        assert predicate.key_condition_expression == "#pk = :pk and #sk >= :sk"
        assert predicate.attribute_values == {":pk": "cust#1", ":sk": 100}
        assert isinstance(predicate.attribute_values[":sk"], Decimal)

    def test_number_sort_key_menu_has_no_begins_with(self):
        prompter = scripted_prompter(["cust#1"])

        build_predicate(KeySchema("pk", "sk"), TYPES.__getitem__, prompter)

        message, menu = prompter.select.call_args.args
        assert message == "Sort key (sk) comparison"
        assert "begins_with" not in menu
        assert prompter.select.call_args.kwargs["default"] == "none"

    def test_string_sort_key_menu_has_begins_with(self):
        prompter = scripted_prompter(["cust#1", "ord"], selection="begins_with")

        predicate = build_predicate(KeySchema("pk", "name"), TYPES.__getitem__, prompter)

        assert "begins_with" in prompter.select.call_args.args[1]
        assert predicate.attribute_values == {":pk": "cust#1", ":sk": "ord"}

    def test_between_asks_for_from_and_to(self):
        prompter = scripted_prompter(["cust#1", "5", "10"], selection="between")

        predicate = build_predicate(KeySchema("pk", "sk"), TYPES.__getitem__, prompter)

        assert [c.args[0] for c in prompter.text.call_args_list] == [
            "Partition key (pk)",
            "sk from value",
            "sk to value",
        ]
        assert predicate.operands == (5, 10)

    def test_none_asks_for_no_operands(self):
        prompter = scripted_prompter(["cust#1"], selection="none")

        predicate = build_predicate(KeySchema("pk", "sk"), TYPES.__getitem__, prompter)

        assert prompter.text.call_count == 1
        assert predicate.key_condition_expression == "#pk = :pk"

    def test_numeric_partition_key_is_coerced(self):
        prompter = scripted_prompter(["7"])

        predicate = build_predicate(
            KeySchema("sk"), {"sk": ScalarType.NUMBER}.__getitem__, prompter
        )

        assert predicate.partition_value == Decimal(7)

    def test_string_partition_value_keeps_whitespace(self):
        prompter = Prompter(input_func=lambda message: "  a b ", stream=io.StringIO())

        predicate = build_predicate(KeySchema("pk"), TYPES.__getitem__, prompter)

        assert predicate.partition_value == "  a b "

    def test_non_numeric_partition_value_raises(self):
        prompter = scripted_prompter(["seven"])

        with pytest.raises(ValueError, match="Not a number"):
            build_predicate(KeySchema("sk"), {"sk": ScalarType.NUMBER}.__getitem__, prompter)
