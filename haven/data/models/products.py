from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class SellerProfileSummary(BaseModel):
    """Profile fields shown next to a product."""
    category: str = Field(description="Seller profile category")


class SellerSummary(BaseModel):
    """Display data for the seller who owns a product."""
    firstname: str = Field(default="", description="Seller first name")
    lastname: str = Field(default="", description="Seller last name")
    profile: Optional[SellerProfileSummary] = Field(default=None, description="Seller profile, if onboarded")

    @property
    def display_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()


class ProductView(BaseModel):
    """Response model for a catalog product joined with its seller."""
    product_id: str = Field(description="Unique product identifier")
    name: str = Field(description="Product name")
    description: str = Field(default="", description="Product description")
    price: Decimal = Field(description="Product price, currency scale")
    image: str = Field(default="", description="Product image URI")
    category: Optional[str] = Field(default=None, description="Product category label")
    user_id: str = Field(description="Owning seller's user id")
    seller: SellerSummary = Field(description="Owning seller display data")
