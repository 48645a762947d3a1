from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol

from .models import (
    # Filter classes
    Predicate,
    # Response models
    ProductStats,
    UserRecord,
    # List response models
    StringList,
)

# Raw rows handed across the store boundary. Shapes:
#   product: product columns + "seller": {"firstname", "lastname", "profile": {"category"} | None}
#   seller:  profile columns + "user": {"firstname", "lastname"}
#   review:  review columns + "user": {"user_id", "firstname", "lastname"} | None
#   story:   story columns
Row = Dict[str, Any]


# ---- Data access protocols ----

class ProductStore(Protocol):
    """
    Read contract the catalog query runs against.

    - Implementations MUST NOT cache results inside these methods.
      Each call should execute a fresh query against the underlying source.
    - `find` orders by product name ascending, ties broken by product_id.
    """

    def count(self, predicate: Predicate) -> int:
        """Count products matching the predicate."""
        ...

    def find(self, predicate: Predicate, limit: Optional[int] = None, offset: int = 0) -> List[Row]:
        """Get up to `limit` matching product rows starting at `offset`."""
        ...

    def get_product(self, product_id: str) -> Optional[Row]:
        """Get a single product row, or None."""
        ...


class CatalogReader(Protocol):
    """Reads backing seller profiles, reviews, stories and sign-in."""

    def list_sellers(self) -> List[Row]:
        """List seller profiles ordered by first name, then last name."""
        ...

    def get_seller(self, user_id: str) -> Optional[Row]:
        """Get one seller profile, or None."""
        ...

    def list_categories(self) -> StringList:
        """List distinct seller profile categories."""
        ...

    def list_reviews(self, product_id: str) -> List[Row]:
        """List reviews for a product, oldest first."""
        ...

    def get_product_stats(self, product_id: str) -> ProductStats:
        """Get review average and count for a product."""
        ...

    def list_stories(self, user_id: str) -> List[Row]:
        """List a seller's stories, newest first."""
        ...

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        """Look up an account by login email."""
        ...


class CatalogWriter(Protocol):
    """Mutations issued by the form actions."""

    def create_user(self, firstname: str, lastname: str, email: str, password_hash: str, user_type: str) -> str:
        ...

    def create_story(self, user_id: str, content: str) -> str:
        ...

    def create_review(self, user_id: str, product_id: str, rating: int, review: str) -> str:
        ...

    def update_seller_basics(
        self,
        user_id: str,
        firstname: str,
        lastname: str,
        category: str,
        phone: str,
        description: str,
        image_url: str,
    ) -> None:
        """Update account names and profile fields in one transaction."""
        ...

    def update_product_description(self, product_id: str, description: str) -> None:
        ...

    def update_product(self, product_id: str, name: str, description: str, image: str, price: Decimal) -> None:
        ...

    def create_product(
        self,
        user_id: str,
        name: str,
        price: Decimal,
        description: str,
        image: str,
        category: Optional[str],
    ) -> str:
        ...

    def delete_product(self, product_id: str, user_id: str) -> None:
        """Delete a product owned by `user_id`; LookupError if there is none."""
        ...


class DataAccess(ProductStore, CatalogReader, Protocol):
    """Backend-agnostic read contract for the catalog page."""


class MarketplaceStore(DataAccess, CatalogWriter, Protocol):
    """Read/write contract required by the form actions."""
