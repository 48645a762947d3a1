from decimal import Decimal

import pandas as pd
import pytest

from haven.backend.seed_data import ANA, CARLOS, PEDRO, fixture_id
from haven.data.backends.csv_backend import CsvDataAccess
from haven.data.catalog import CatalogQuery, ProfileQuery
from haven.data.models import FilterSelection, Predicate, PriceBracket

SORTED_NAMES = [
    "Beaded Earrings",
    "Chilean Coastline",
    "Clay Coffee Mug",
    "Hand-carved Wooden Bowl",
    "Mini Clay Vase",
    "Woven Table Runner",
]


@pytest.fixture
def da(seeded_csv_dir):
    return CsvDataAccess(data_dir=seeded_csv_dir)


def test_count_and_find_all(da):
    assert da.count(Predicate()) == 6
    assert [row["name"] for row in da.find(Predicate())] == SORTED_NAMES


def test_find_limit_and_offset(da):
    rows = da.find(Predicate(), limit=2, offset=3)
    assert [row["name"] for row in rows] == SORTED_NAMES[3:5]
    assert da.find(Predicate(), limit=5, offset=10) == []


def test_bracket_counts(da):
    query = CatalogQuery(da)
    assert query.count(FilterSelection(price_bracket=PriceBracket.UNDER_15)) == 1
    assert query.count(FilterSelection(price_bracket=PriceBracket.FROM_15_TO_30)) == 3
    assert query.count(FilterSelection(price_bracket=PriceBracket.ABOVE_30)) == 2


def test_category_filters_on_seller_profile(da):
    page = CatalogQuery(da).page(FilterSelection(category="Woodwork"), page_size=10)
    assert page.total_count == 3
    assert {item.user_id for item in page.items} == {PEDRO}
    # Product-level category labels are not what the filter matches
    assert CatalogQuery(da).count(FilterSelection(category="Pottery")) == 0


def test_seller_filter(da):
    names = [item.name for item in CatalogQuery(da).page(FilterSelection(seller_id=ANA), 10).items]
    assert names == ["Clay Coffee Mug", "Mini Clay Vase", "Woven Table Runner"]


def test_second_page(da):
    page = CatalogQuery(da).page(FilterSelection(), page_size=4, page_number=2)
    assert page.total_count == 6
    assert [item.name for item in page.items] == SORTED_NAMES[4:]


def test_prices_are_decimal(da):
    row = da.get_product(fixture_id("product", "Beaded Earrings"))
    assert row["price"] == Decimal("35.50")
    assert isinstance(row["price"], Decimal)
    assert row["seller"]["profile"] == {"category": "Woodwork"}


def test_missing_product(da):
    assert da.get_product("missing") is None


def test_sellers_categories_and_lookup(da):
    profiles = ProfileQuery(da)
    assert [s.firstname for s in profiles.sellers()] == ["Ana", "Pedro"]
    assert profiles.categories().values == ["Ceramics", "Woodwork"]
    assert profiles.seller(PEDRO).phone == "123-456-7890"
    assert profiles.seller(CARLOS) is None


def test_reviews_and_stats(da):
    profiles = ProfileQuery(da)
    bowl = fixture_id("product", "Hand-carved Wooden Bowl")
    reviews = profiles.reviews(bowl)
    assert [r.rating for r in reviews] == [5, 4]
    assert reviews[0].user.firstname == "Carlos"
    stats = profiles.stats(bowl)
    assert (stats.average_rating, stats.review_count) == ("4.5", 2)
    empty = profiles.stats(fixture_id("product", "Mini Clay Vase"))
    assert (empty.average_rating, empty.review_count) == ("0.0", 0)


def test_stories_newest_first(da):
    stories = ProfileQuery(da).stories(PEDRO)
    assert len(stories) == 2
    assert stories[0].created_at > stories[1].created_at


def test_user_lookup(da):
    user = da.get_user_by_email("ana.gomez@example.com")
    assert user.user_id == ANA
    assert user.password.startswith("$2")
    assert da.get_user_by_email("nobody@example.com") is None


def test_seller_without_profile(tmp_path):
    pd.DataFrame([
        {"user_id": "u-1", "firstname": "Luz", "lastname": "Rojas", "email": "luz@example.com",
         "password": "x", "user_type": "seller"},
    ]).to_csv(tmp_path / "users.csv", index=False)
    pd.DataFrame(columns=["user_id", "category", "description", "image_url", "phone"]).to_csv(
        tmp_path / "seller_profiles.csv", index=False
    )
    pd.DataFrame([
        {"product_id": "p-1", "user_id": "u-1", "name": "Alpaca Scarf", "description": "",
         "price": "29.90", "image": "", "category": ""},
    ]).to_csv(tmp_path / "products.csv", index=False)

    da = CsvDataAccess(data_dir=tmp_path)
    view = CatalogQuery(da).product("p-1")
    assert view.seller.profile is None
    assert view.seller.display_name == "Luz Rojas"
    assert view.description == ""
    assert view.category is None
    assert CatalogQuery(da).count(FilterSelection(category="Textiles")) == 0
    assert ProfileQuery(da).reviews("p-1") == []


def test_missing_data_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        CsvDataAccess(data_dir=tmp_path / "nope")


def test_missing_required_file(seeded_csv_dir):
    (seeded_csv_dir / "products.csv").unlink()
    with pytest.raises(FileNotFoundError, match="products.csv"):
        CsvDataAccess(data_dir=seeded_csv_dir)
