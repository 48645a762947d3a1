from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .products import ProductView


class StringList(BaseModel):
    """Generic container for lists of unique string values."""
    values: List[str] = Field(description="List of unique string values")


class CatalogPage(BaseModel):
    """One page of the filtered catalog plus the unpaginated match count."""
    total_count: int = Field(description="Products matching the filter, ignoring pagination")
    items: List[ProductView] = Field(description="Products on this page, ordered by name")
    page: int = Field(ge=1, description="1-based page number")
    page_size: int = Field(ge=1, description="Requested page size")

    @property
    def pages(self) -> int:
        return (self.total_count + self.page_size - 1) // self.page_size
