from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PriceBracket(str, Enum):
    """Price buckets offered by the catalog sidebar."""
    UNDER_15 = "under-15"
    FROM_15_TO_30 = "15-30"
    ABOVE_30 = "above-30"


class FilterSelection(BaseModel):
    """Filters for the product catalog.

    Absent fields impose no constraint. Field aliases match the query-string
    names used by the catalog page (`categories`, `sellers`, `price`).
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    category: Optional[str] = Field(default=None, alias="categories", description="Seller profile category filter")
    seller_id: Optional[str] = Field(default=None, alias="sellers", description="Owning seller's user id filter")
    price_bracket: Optional[PriceBracket] = Field(default=None, alias="price", description="Price bracket token")

    @field_validator("category", "seller_id", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("price_bracket", mode="before")
    @classmethod
    def _unknown_bracket_is_absent(cls, value: Any) -> Optional[PriceBracket]:
        # Unrecognized tokens behave exactly like a missing bracket.
        if value is None or isinstance(value, PriceBracket):
            return value
        try:
            return PriceBracket(value)
        except ValueError:
            return None

    @classmethod
    def from_search_params(cls, params: Mapping[str, Any]) -> "FilterSelection":
        """Build a selection from raw query-string parameters."""
        return cls.model_validate({key: params.get(key) for key in ("categories", "sellers", "price")})


class PriceRange(BaseModel):
    """Bounds on a product price; every present bound must hold."""
    model_config = ConfigDict(frozen=True)

    gt: Optional[Decimal] = Field(default=None, description="Exclusive lower bound")
    gte: Optional[Decimal] = Field(default=None, description="Inclusive lower bound")
    lt: Optional[Decimal] = Field(default=None, description="Exclusive upper bound")
    lte: Optional[Decimal] = Field(default=None, description="Inclusive upper bound")

    def contains(self, price: Decimal) -> bool:
        if not isinstance(price, Decimal):
            price = Decimal(str(price))
        if self.gt is not None and not price > self.gt:
            return False
        if self.gte is not None and not price >= self.gte:
            return False
        if self.lt is not None and not price < self.lt:
            return False
        if self.lte is not None and not price <= self.lte:
            return False
        return True


class Predicate(BaseModel):
    """AND of optional product constraints handed to a ProductStore."""
    model_config = ConfigDict(frozen=True)

    seller_category_equals: Optional[str] = Field(default=None, description="Seller profile category must equal")
    seller_id_equals: Optional[str] = Field(default=None, description="Owning seller id must equal")
    price_in_range: Optional[PriceRange] = Field(default=None, description="Price must fall in range")

    @property
    def is_empty(self) -> bool:
        return (
            self.seller_category_equals is None
            and self.seller_id_equals is None
            and self.price_in_range is None
        )
