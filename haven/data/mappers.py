"""Raw store rows -> typed views.

Nullable columns are defaulted here, once, at the store boundary.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from .models import (
    ProductStats,
    ProductView,
    ReviewAuthor,
    ReviewView,
    SellerProfileSummary,
    SellerSummary,
    SellerView,
    StoryView,
)

PLACEHOLDER_AVATAR = "/images/placeholder-avatar.png"


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_view(row: Mapping[str, Any]) -> ProductView:
    """Map a joined product row to a ProductView.

    Raises:
        KeyError: If the row has no product_id.
    """
    product_id = row["product_id"]
    seller = row.get("seller") or {}
    profile = seller.get("profile")
    return ProductView(
        product_id=str(product_id),
        name=_text(row.get("name")),
        description=_text(row.get("description")),
        price=_decimal(row["price"]),
        image=_text(row.get("image")),
        category=row.get("category"),
        user_id=_text(row.get("user_id")),
        seller=SellerSummary(
            firstname=_text(seller.get("firstname")),
            lastname=_text(seller.get("lastname")),
            profile=None if profile is None else SellerProfileSummary(category=_text(profile.get("category"))),
        ),
    )


def to_seller_view(row: Mapping[str, Any]) -> SellerView:
    user = row.get("user") or {}
    return SellerView(
        user_id=str(row["user_id"]),
        firstname=_text(user.get("firstname")),
        lastname=_text(user.get("lastname")),
        category=_text(row.get("category")),
        description=_text(row.get("description")),
        image_url=_text(row.get("image_url"), PLACEHOLDER_AVATAR),
        phone=_text(row.get("phone")),
    )


def to_review_view(row: Mapping[str, Any]) -> ReviewView:
    user = row.get("user")
    return ReviewView(
        review_id=str(row["review_id"]),
        user_id=_text(row.get("user_id")),
        product_id=_text(row.get("product_id")),
        rating=int(row["rating"]),
        review=_text(row.get("review")),
        created_at=row.get("created_at") or datetime.now(timezone.utc),
        user=None if user is None else ReviewAuthor(
            user_id=_text(user.get("user_id")),
            firstname=_text(user.get("firstname")),
            lastname=_text(user.get("lastname")),
        ),
    )


def to_story_view(row: Mapping[str, Any]) -> StoryView:
    return StoryView(
        story_id=str(row["story_id"]),
        content=_text(row.get("content")),
        created_at=row["created_at"],
    )


def to_product_stats(average: Optional[Any], count: int) -> ProductStats:
    """Format a rating average to one decimal place ("0.0" when unrated)."""
    if average is None or not count:
        return ProductStats(average_rating="0.0", review_count=int(count or 0))
    rounded = _decimal(average).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return ProductStats(average_rating=str(rounded), review_count=int(count))
