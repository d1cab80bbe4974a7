import re

import pytest

from sqlift.naming import singularize, to_pascal_case, to_snake_case


class TestPascalCase:
    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("order_line_items", "OrderLineItems"),
            ("users", "Users"),
            ("order__status", "OrderStatus"),
            ("_leading", "Leading"),
            ("already_CamelPart", "AlreadyCamelPart"),
            ("", ""),
        ],
    )
    def test_conversion(self, identifier, expected):
        assert to_pascal_case(identifier) == expected

    @pytest.mark.parametrize("identifier", ["order_line_items", "user_accounts", "a_b_c"])
    def test_segments_recoverable(self, identifier):
        words = re.findall(r"[A-Z][a-z0-9]*", to_pascal_case(identifier))
        assert [w.lower() for w in words] == identifier.split("_")


class TestSnakeCase:
    def test_from_pascal(self):
        assert to_snake_case("OrderStatus") == "order_status"

    def test_from_camel(self):
        assert to_snake_case("orderStatus") == "order_status"

    def test_dashes_and_duplicate_underscores(self):
        assert to_snake_case("in-progress__now") == "in_progress_now"


class TestSingularize:
    @pytest.mark.parametrize(
        "word, expected",
        [
            ("categories", "category"),
            ("users", "user"),
            ("staff", "staff"),
            ("address", "address"),
            ("people", "people"),
            ("OrderItems", "OrderItem"),
        ],
    )
    def test_singularize(self, word, expected):
        assert singularize(word) == expected
