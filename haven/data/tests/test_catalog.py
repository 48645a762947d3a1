from decimal import Decimal
from typing import List, Optional

import pytest

from haven.config import set_config_for_test
from haven.data.catalog import CatalogQuery
from haven.data.models import FilterSelection, PriceBracket, Predicate


def _row(product_id, name, price, seller_id="s-1", category="Ceramics"):
    return {
        "product_id": product_id,
        "user_id": seller_id,
        "name": name,
        "description": None,
        "price": Decimal(price),
        "image": None,
        "category": None,
        "seller": {
            "firstname": "Ana",
            "lastname": "Gomez",
            "profile": None if category is None else {"category": category},
        },
    }


class FakeStore:
    """In-memory ProductStore that records every call."""

    def __init__(self, rows):
        self.rows = list(rows)
        self.calls: List[tuple] = []

    def _matches(self, row, predicate: Predicate) -> bool:
        profile = row["seller"]["profile"]
        if predicate.seller_category_equals is not None:
            if profile is None or profile["category"] != predicate.seller_category_equals:
                return False
        if predicate.seller_id_equals is not None and row["user_id"] != predicate.seller_id_equals:
            return False
        if predicate.price_in_range is not None and not predicate.price_in_range.contains(row["price"]):
            return False
        return True

    def count(self, predicate):
        self.calls.append(("count", predicate))
        return sum(1 for r in self.rows if self._matches(r, predicate))

    def find(self, predicate, limit: Optional[int] = None, offset: int = 0):
        self.calls.append(("find", predicate, limit, offset))
        matched = sorted(
            (r for r in self.rows if self._matches(r, predicate)),
            key=lambda r: (r["name"], r["product_id"]),
        )
        end = None if limit is None else offset + limit
        return matched[offset:end]

    def get_product(self, product_id):
        return next((r for r in self.rows if r["product_id"] == product_id), None)


@pytest.fixture
def store():
    return FakeStore([
        _row("p-5", "Woven Table Runner", "22.00", seller_id="s-2", category="Textiles"),
        _row("p-1", "Beaded Earrings", "35.50"),
        _row("p-3", "Clay Coffee Mug", "18.00"),
        _row("p-4", "Mini Clay Vase", "42.00", seller_id="s-2", category=None),
        _row("p-2", "Chilean Coastline", "12.00"),
        _row("p-7", "Clay Coffee Mug", "15.00"),
        _row("p-6", "Clay Coffee Mug", "30.00"),
    ])


def test_rejects_non_positive_page_size(store):
    with pytest.raises(ValueError):
        CatalogQuery(store).page(FilterSelection(), page_size=0, page_number=1)


def test_rejects_page_number_below_one(store):
    with pytest.raises(ValueError):
        CatalogQuery(store).page(FilterSelection(), page_size=3, page_number=0)


def test_page_reports_total_and_bounds_items(store):
    page = CatalogQuery(store).page(FilterSelection(), page_size=3, page_number=1)
    assert page.total_count == 7
    assert len(page.items) == 3
    assert page.pages == 3
    assert page.page == 1


def test_offset_is_derived_from_page_number(store):
    CatalogQuery(store).page(FilterSelection(), page_size=3, page_number=3)
    find = [c for c in store.calls if c[0] == "find"][-1]
    assert find[2:] == (3, 6)


def test_page_past_end_is_empty(store):
    page = CatalogQuery(store).page(FilterSelection(), page_size=3, page_number=10)
    assert page.items == []
    assert page.total_count == 7


def test_pages_cover_matches_in_order_without_repeats(store):
    query = CatalogQuery(store)
    seen = []
    for number in range(1, 4):
        seen.extend(item.product_id for item in query.page(FilterSelection(), 3, number).items)
    assert seen == ["p-1", "p-2", "p-3", "p-6", "p-7", "p-4", "p-5"]


def test_equal_names_break_ties_by_product_id(store):
    page = CatalogQuery(store).page(FilterSelection(), page_size=10)
    mugs = [item.product_id for item in page.items if item.name == "Clay Coffee Mug"]
    assert mugs == ["p-3", "p-6", "p-7"]


def test_price_bracket_filters_inclusive_middle(store):
    query = CatalogQuery(store)
    middle = query.page(FilterSelection(price_bracket=PriceBracket.FROM_15_TO_30), 10)
    assert {item.price for item in middle.items} == {Decimal("15.00"), Decimal("18.00"), Decimal("22.00"), Decimal("30.00")}
    assert query.count(FilterSelection(price_bracket=PriceBracket.UNDER_15)) == 1
    assert query.count(FilterSelection(price_bracket=PriceBracket.ABOVE_30)) == 2


def test_brackets_partition_the_catalog(store):
    query = CatalogQuery(store)
    counts = [query.count(FilterSelection(price_bracket=b)) for b in PriceBracket]
    assert sum(counts) == query.count(FilterSelection())


def test_category_filter_uses_seller_profile(store):
    page = CatalogQuery(store).page(FilterSelection(category="Textiles"), 10)
    assert [item.product_id for item in page.items] == ["p-5"]


def test_filters_combine_with_and(store):
    query = CatalogQuery(store)
    selection = FilterSelection(seller_id="s-2", price_bracket=PriceBracket.ABOVE_30)
    assert [item.product_id for item in query.page(selection, 10).items] == ["p-4"]


def test_seller_without_profile_maps_to_none(store):
    product = CatalogQuery(store).product("p-4")
    assert product.seller.profile is None


def test_every_call_requeries_the_store(store):
    query = CatalogQuery(store)
    assert query.count(FilterSelection()) == 7
    store.rows.append(_row("p-8", "Agate Ring", "9.00"))
    first = query.page(FilterSelection(), page_size=1)
    assert first.total_count == 8
    assert first.items[0].product_id == "p-8"


def test_repeated_queries_are_stable(store):
    query = CatalogQuery(store)
    selection = FilterSelection(price_bracket=PriceBracket.FROM_15_TO_30)
    assert query.page(selection, 2, 2) == query.page(selection, 2, 2)


def test_missing_product_is_none(store):
    assert CatalogQuery(store).product("nope") is None


def test_products_by_seller(store):
    names = [p.name for p in CatalogQuery(store).products_by_seller("s-2")]
    assert names == ["Mini Clay Vase", "Woven Table Runner"]


def test_featured_uses_configured_limit(store):
    set_config_for_test(featured_products_limit=2, log_level="WARNING")
    featured = CatalogQuery(store).featured()
    assert [p.product_id for p in featured] == ["p-1", "p-2"]
    assert len(CatalogQuery(store).featured(limit=5)) == 5
