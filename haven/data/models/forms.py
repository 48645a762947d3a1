from __future__ import annotations

import re
from decimal import Decimal
from typing import Annotated, Literal, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[\W_]).{8,}$")


def _at_least(length: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) < length:
            raise PydanticCustomError("too_short", message)
        return value
    return AfterValidator(check)


FirstName = Annotated[str, _at_least(1, "First name is required.")]
LastName = Annotated[str, _at_least(1, "Last name is required.")]
Password = Annotated[str, _at_least(8, "Password must be at least 8 characters.")]
StoryContent = Annotated[str, _at_least(10, "Story must be at least 10 characters")]
ReviewText = Annotated[str, _at_least(10, "Review must be at least 10 characters")]
Description = Annotated[str, _at_least(10, "Description must be at least 10 characters long.")]
ProductName = Annotated[str, _at_least(1, "Product name is required.")]


class RegisterForm(BaseModel):
    """Sign-up form for buyers and sellers."""
    model_config = ConfigDict(populate_by_name=True)

    firstname: FirstName
    lastname: LastName
    email: EmailStr
    password: Password = Field(max_length=72)
    confirm_password: str = Field(alias="confirmPassword", min_length=8)
    user_type: Literal["user", "seller"]

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        if not _PASSWORD_RULE.match(value):
            raise PydanticCustomError(
                "weak_password",
                "Password must include uppercase, lowercase, number, and special character.",
            )
        return value

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise PydanticCustomError("password_mismatch", "Passwords do not match")
        return value


class StoryForm(BaseModel):
    """New story posted on a seller profile."""
    user_id: UUID
    content: StoryContent


class ReviewForm(BaseModel):
    """New product review."""
    user_id: UUID
    product_id: UUID
    rating: int = Field(ge=1, le=5)
    review: ReviewText


class DescriptionForm(BaseModel):
    """Inline product description edit."""
    product_id: UUID
    description: Description = Field(max_length=500)


class ProductForm(BaseModel):
    """Create or fully update a product."""
    product_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    name: ProductName
    description: str = ""
    image: str = ""
    price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    category: str = ""


class DeleteProductForm(BaseModel):
    """Product removal request."""
    product_id: UUID
    user_id: UUID


class SellerBasicsForm(BaseModel):
    """Seller profile edit: account names plus profile fields."""
    user_id: UUID
    firstname: str = ""
    lastname: str = ""
    category: str = ""
    phone: str = ""
    description: str = ""
    image_url: str = ""
