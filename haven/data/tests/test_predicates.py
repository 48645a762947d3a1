from decimal import Decimal

import pytest

from haven.data.models import FilterSelection, PriceBracket
from haven.data.predicates import PRICE_BRACKETS, build_predicate


def test_empty_selection_builds_empty_predicate():
    predicate = build_predicate(FilterSelection())
    assert predicate.is_empty
    assert predicate.price_in_range is None


def test_category_and_seller_map_to_equality_clauses():
    predicate = build_predicate(FilterSelection(category="Woodwork", seller_id="seller-1"))
    assert predicate.seller_category_equals == "Woodwork"
    assert predicate.seller_id_equals == "seller-1"
    assert predicate.price_in_range is None


@pytest.mark.parametrize(
    "price, bracket",
    [
        ("0", PriceBracket.UNDER_15),
        ("14.99", PriceBracket.UNDER_15),
        ("15.00", PriceBracket.FROM_15_TO_30),
        ("22.50", PriceBracket.FROM_15_TO_30),
        ("30.00", PriceBracket.FROM_15_TO_30),
        ("30.01", PriceBracket.ABOVE_30),
        ("1000", PriceBracket.ABOVE_30),
    ],
)
def test_every_price_falls_in_exactly_one_bracket(price, bracket):
    matches = [b for b, price_range in PRICE_BRACKETS.items() if price_range.contains(Decimal(price))]
    assert matches == [bracket]


def test_bracket_bounds():
    assert PRICE_BRACKETS[PriceBracket.UNDER_15].lt == Decimal("15")
    middle = PRICE_BRACKETS[PriceBracket.FROM_15_TO_30]
    assert (middle.gte, middle.lte) == (Decimal("15"), Decimal("30"))
    assert PRICE_BRACKETS[PriceBracket.ABOVE_30].gt == Decimal("30")


def test_query_string_tokens_match_enum():
    from_params = FilterSelection.from_search_params({"price": "under-15"})
    assert build_predicate(from_params) == build_predicate(FilterSelection(price_bracket=PriceBracket.UNDER_15))


def test_query_string_names_populate_fields():
    selection = FilterSelection.from_search_params({"categories": "Ceramics", "sellers": "abc", "price": "15-30"})
    assert selection.category == "Ceramics"
    assert selection.seller_id == "abc"
    assert selection.price_bracket is PriceBracket.FROM_15_TO_30


def test_unknown_bracket_token_is_absent():
    selection = FilterSelection.from_search_params({"price": "cheap"})
    assert selection.price_bracket is None
    assert build_predicate(selection).is_empty


def test_blank_strings_are_absent():
    selection = FilterSelection.from_search_params({"categories": "", "sellers": "  ", "price": ""})
    assert build_predicate(selection).is_empty


def test_all_clauses_combine():
    predicate = build_predicate(
        FilterSelection(category="Ceramics", seller_id="s", price_bracket=PriceBracket.ABOVE_30)
    )
    assert not predicate.is_empty
    assert predicate.price_in_range.contains(Decimal("42.00"))
    assert not predicate.price_in_range.contains(Decimal("30"))
