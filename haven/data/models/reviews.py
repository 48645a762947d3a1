from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewAuthor(BaseModel):
    """Reviewer display data."""
    user_id: str = Field(description="Reviewer's user id")
    firstname: str = Field(default="", description="Reviewer first name")
    lastname: str = Field(default="", description="Reviewer last name")


class ReviewView(BaseModel):
    """Response model for product review data."""
    review_id: str = Field(description="Unique review identifier")
    user_id: str = Field(description="Reviewer's user id")
    product_id: str = Field(description="Reviewed product")
    rating: int = Field(ge=1, le=5, description="Star rating")
    review: str = Field(default="", description="Review text")
    created_at: datetime = Field(description="Review timestamp")
    user: Optional[ReviewAuthor] = Field(default=None, description="Reviewer, if still registered")


class ProductStats(BaseModel):
    """Aggregate review stats for one product."""
    average_rating: str = Field(description="Average rating with one decimal place")
    review_count: int = Field(description="Number of reviews")
