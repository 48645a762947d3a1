from __future__ import annotations

from pydantic import BaseModel, Field


class SellerView(BaseModel):
    """Response model for seller profile data."""
    user_id: str = Field(description="Seller's user id")
    firstname: str = Field(default="", description="Seller first name")
    lastname: str = Field(default="", description="Seller last name")
    category: str = Field(default="", description="Primary craft category")
    description: str = Field(default="", description="Seller bio")
    image_url: str = Field(description="Avatar image URI")
    phone: str = Field(default="", description="Contact phone")
