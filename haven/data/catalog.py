from __future__ import annotations

from typing import List, Optional

from haven.config import get_config
from haven.logging import get_logger

from .interface import CatalogReader, ProductStore
from .mappers import to_review_view, to_seller_view, to_story_view, to_view
from .models import (
    CatalogPage,
    FilterSelection,
    Predicate,
    ProductStats,
    ProductView,
    ReviewView,
    SellerView,
    StoryView,
    StringList,
)
from .predicates import build_predicate


class CatalogQuery:
    """Filtered, paginated product reads.

    Every call goes back to the store; nothing is cached here.
    """

    def __init__(self, store: ProductStore) -> None:
        self.store = store
        self.logger = get_logger(__name__)

    def count(self, selection: FilterSelection) -> int:
        """Count products matching the selection, ignoring pagination."""
        return self.store.count(build_predicate(selection))

    def page(self, selection: FilterSelection, page_size: int, page_number: int = 1) -> CatalogPage:
        """Get one page of the filtered catalog, ordered by product name.

        Args:
            selection: Category / seller / price bracket filters.
            page_size: Maximum items on the page; must be positive.
            page_number: 1-based page number. Pages past the end are empty.
        Returns:
            CatalogPage: Total match count plus the items on this page.
        Raises:
            ValueError: If page_size or page_number is out of range.
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {page_number}")

        predicate = build_predicate(selection)
        total = self.store.count(predicate)
        rows = self.store.find(predicate, limit=page_size, offset=page_size * (page_number - 1))
        items = [to_view(row) for row in rows]
        self.logger.debug(f"Catalog page {page_number} (size {page_size}): {len(items)} of {total} products")
        return CatalogPage(total_count=total, items=items, page=page_number, page_size=page_size)

    def all_products(self) -> List[ProductView]:
        return [to_view(row) for row in self.store.find(Predicate())]

    def product(self, product_id: str) -> Optional[ProductView]:
        row = self.store.get_product(product_id)
        return None if row is None else to_view(row)

    def products_by_seller(self, seller_id: str) -> List[ProductView]:
        return [to_view(row) for row in self.store.find(Predicate(seller_id_equals=seller_id))]

    def featured(self, limit: Optional[int] = None) -> List[ProductView]:
        """First few products by name, for the landing page."""
        if limit is None:
            limit = get_config().featured_products_limit
        return [to_view(row) for row in self.store.find(Predicate(), limit=limit)]


class ProfileQuery:
    """Seller profile, review and story reads."""

    def __init__(self, reader: CatalogReader) -> None:
        self.reader = reader

    def sellers(self) -> List[SellerView]:
        return [to_seller_view(row) for row in self.reader.list_sellers()]

    def seller(self, user_id: str) -> Optional[SellerView]:
        row = self.reader.get_seller(user_id)
        return None if row is None else to_seller_view(row)

    def categories(self) -> StringList:
        return self.reader.list_categories()

    def reviews(self, product_id: str) -> List[ReviewView]:
        return [to_review_view(row) for row in self.reader.list_reviews(product_id)]

    def stats(self, product_id: str) -> ProductStats:
        return self.reader.get_product_stats(product_id)

    def stories(self, user_id: str) -> List[StoryView]:
        return [to_story_view(row) for row in self.reader.list_stories(user_id)]
