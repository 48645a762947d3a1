"""Form actions: validate submitted data, apply it to the store, report back.

Actions never raise for bad input or store failures; they return an
ActionResult the page can render next to the form.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from haven.auth.credentials import hash_password
from haven.auth.session import SessionProvider
from haven.data.interface import MarketplaceStore
from haven.data.models import (
    DeleteProductForm,
    DescriptionForm,
    ProductForm,
    RegisterForm,
    ReviewForm,
    SellerBasicsForm,
    StoryForm,
)
from haven.logging import get_logger

NOT_AUTHORIZED = "Not authorized."
_SECRET_FIELDS = {"password", "confirmPassword", "confirm_password"}


class ActionResult(BaseModel):
    """Outcome of a form action."""
    success: bool
    message: Optional[str] = None
    errors: Dict[str, List[str]] = Field(default_factory=dict, description="Messages keyed by form field")
    submitted_data: Optional[Dict[str, Any]] = Field(default=None, description="Echoed input, secrets removed")


def _field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "form"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def _invalid(exc: ValidationError, form_data: Optional[Mapping[str, Any]] = None) -> ActionResult:
    submitted = None
    if form_data is not None:
        submitted = {k: v for k, v in form_data.items() if k not in _SECRET_FIELDS}
    return ActionResult(success=False, errors=_field_errors(exc), submitted_data=submitted)


class MarketplaceActions:
    """Mutations behind the marketplace forms.

    Product and profile edits are owner-only: the signed-in user from
    `session` must own the row being changed.
    """
    def __init__(self, store: MarketplaceStore, session: SessionProvider) -> None:
        self.store = store
        self.session = session
        self.logger = get_logger(__name__)

    def _is_owner(self, user_id: Optional[str]) -> bool:
        user = self.session.current_user()
        return user is not None and user_id is not None and user.id == user_id

    # ---------- accounts ----------

    def register(self, form_data: Mapping[str, Any]) -> ActionResult:
        try:
            form = RegisterForm.model_validate(dict(form_data))
        except ValidationError as e:
            return _invalid(e, form_data)

        try:
            if self.store.get_user_by_email(form.email) is not None:
                return ActionResult(success=False, message="A user with this email already exists.")
            self.store.create_user(
                firstname=form.firstname,
                lastname=form.lastname,
                email=form.email,
                password_hash=hash_password(form.password),
                user_type=form.user_type,
            )
        except Exception:
            self.logger.exception("Registration failed")
            return ActionResult(success=False, message="Registration failed. Please try again.")
        return ActionResult(success=True)

    # ---------- stories and reviews ----------

    def post_new_story(self, form_data: Mapping[str, Any]) -> ActionResult:
        try:
            form = StoryForm.model_validate(dict(form_data))
        except ValidationError as e:
            return _invalid(e, form_data)

        try:
            self.store.create_story(str(form.user_id), form.content)
        except Exception:
            self.logger.exception("Failed to add story")
            return ActionResult(success=False, message="Error adding the story, try again.")
        return ActionResult(success=True, message="Story added successfully!")

    def post_new_review(self, form_data: Mapping[str, Any]) -> ActionResult:
        try:
            form = ReviewForm.model_validate(dict(form_data))
        except ValidationError as e:
            return _invalid(e, form_data)

        try:
            self.store.create_review(str(form.user_id), str(form.product_id), form.rating, form.review)
        except Exception:
            self.logger.exception("Failed to post review")
            return ActionResult(success=False, message="Failed to submit review. Please try again later.")
        return ActionResult(success=True, message="Review submitted!")

    # ---------- products ----------

    def update_product_description(self, form_data: Mapping[str, Any]) -> ActionResult:
        try:
            form = DescriptionForm.model_validate(dict(form_data))
        except ValidationError as e:
            return _invalid(e)

        product_id = str(form.product_id)
        try:
            product = self.store.get_product(product_id)
            if product is None:
                return ActionResult(success=False, message="Product not found.")
            if not self._is_owner(product["user_id"]):
                return ActionResult(success=False, message=NOT_AUTHORIZED)
            self.store.update_product_description(product_id, form.description)
        except Exception:
            self.logger.exception(f"Failed to update description of {product_id}")
            return ActionResult(success=False, message="Failed to update description.")
        return ActionResult(success=True, message="Description updated successfully.")

    def update_product_full(self, form_data: Mapping[str, Any]) -> ActionResult:
        try:
            form = ProductForm.model_validate(dict(form_data))
        except ValidationError as e:
            return _invalid(e, form_data)
        if form.product_id is None:
            return ActionResult(success=False, errors={"product_id": ["Product id is required."]})

        product_id = str(form.product_id)
        try:
            product = self.store.get_product(product_id)
            if product is None:
                return ActionResult(success=False, message="Product not found.")
            if not self._is_owner(product["user_id"]):
                return ActionResult(success=False, message=NOT_AUTHORIZED)
            self.store.update_product(product_id, form.name, form.description, form.image, form.price)
        except Exception:
            self.logger.exception(f"Failed to update product {product_id}")
            return ActionResult(success=False, message="Failed to update product.")
        return ActionResult(success=True, message="Product updated successfully.")

    def create_product(self, form_data: Mapping[str, Any]) -> ActionResult:
        try:
            form = ProductForm.model_validate(dict(form_data))
        except ValidationError as e:
            return _invalid(e, form_data)

        user_id = None if form.user_id is None else str(form.user_id)
        if not self._is_owner(user_id):
            return ActionResult(success=False, message=NOT_AUTHORIZED)

        try:
            self.store.create_product(
                user_id=user_id,
                name=form.name,
                price=form.price,
                description=form.description,
                image=form.image,
                category=form.category or None,
            )
        except Exception:
            self.logger.exception(f"Failed to create product for {user_id}")
            return ActionResult(success=False, message="Failed to create product.")
        return ActionResult(success=True, message="Product created successfully.")

    def delete_product(self, form_data: Mapping[str, Any]) -> ActionResult:
        try:
            form = DeleteProductForm.model_validate(dict(form_data))
        except ValidationError as e:
            return _invalid(e)

        user_id = str(form.user_id)
        if not self._is_owner(user_id):
            return ActionResult(success=False, message=NOT_AUTHORIZED)

        try:
            self.store.delete_product(str(form.product_id), user_id)
        except Exception:
            self.logger.exception(f"Failed to delete product {form.product_id}")
            return ActionResult(success=False, message="Failed to delete product.")
        return ActionResult(success=True, message="Product deleted.")

    # ---------- seller profile ----------

    def update_seller_basics(self, form_data: Mapping[str, Any]) -> ActionResult:
        try:
            form = SellerBasicsForm.model_validate(dict(form_data))
        except ValidationError as e:
            return _invalid(e, form_data)

        user_id = str(form.user_id)
        if not self._is_owner(user_id):
            return ActionResult(success=False, message=NOT_AUTHORIZED)

        try:
            self.store.update_seller_basics(
                user_id=user_id,
                firstname=form.firstname,
                lastname=form.lastname,
                category=form.category,
                phone=form.phone,
                description=form.description,
                image_url=form.image_url,
            )
        except Exception:
            self.logger.exception(f"Failed to update seller profile {user_id}")
            return ActionResult(success=False, message="Failed to update profile.")
        return ActionResult(success=True, message="Profile updated successfully.")
