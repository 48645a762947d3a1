from .data_filters import (
    FilterSelection,
    PriceBracket,
    PriceRange,
    Predicate,
)

from .products import ProductView, SellerProfileSummary, SellerSummary
from .sellers import SellerView
from .reviews import ProductStats, ReviewAuthor, ReviewView
from .stories import StoryView
from .users import UserRecord, UserType
from .forms import (
    DeleteProductForm,
    DescriptionForm,
    ProductForm,
    RegisterForm,
    ReviewForm,
    SellerBasicsForm,
    StoryForm,
)
from .list_response import (
    CatalogPage,
    StringList,
)

__all__ = [
    # Filter classes
    "FilterSelection",
    "PriceBracket",
    "PriceRange",
    "Predicate",
    # Response models
    "ProductView",
    "SellerProfileSummary",
    "SellerSummary",
    "SellerView",
    "ProductStats",
    "ReviewAuthor",
    "ReviewView",
    "StoryView",
    "UserRecord",
    "UserType",
    # Form models
    "DeleteProductForm",
    "DescriptionForm",
    "ProductForm",
    "RegisterForm",
    "ReviewForm",
    "SellerBasicsForm",
    "StoryForm",
    # List response models
    "CatalogPage",
    "StringList",
]
