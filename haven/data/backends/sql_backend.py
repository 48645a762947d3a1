from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy import Select, func, select

from ...logging import get_logger
from ..interface import MarketplaceStore, Row
from ..mappers import to_product_stats
from ..models import Predicate, ProductStats, StringList, UserRecord
from .orm import Database, Product, Review, SellerProfile, Story, User, get_database


class SqlDataAccess(MarketplaceStore):
    """
    SQLAlchemy-backed implementation.
    - Every read runs as a single statement in a short-lived session.
    - Writes commit in their own transaction; nothing is cached between calls.
    """

    def __init__(self, database: Optional[Database] = None) -> None:
        self.database = database if database is not None else get_database()
        self.logger = get_logger(__name__)

    # ---------- query helpers ----------

    @staticmethod
    def _catalog_select(*columns: Any) -> Select:
        return (
            select(*columns)
            .select_from(Product)
            .outerjoin(User, User.user_id == Product.user_id)
            .outerjoin(SellerProfile, SellerProfile.user_id == Product.user_id)
        )

    @staticmethod
    def _where(stmt: Select, predicate: Predicate) -> Select:
        if predicate.seller_category_equals is not None:
            stmt = stmt.where(SellerProfile.category == predicate.seller_category_equals)
        if predicate.seller_id_equals is not None:
            stmt = stmt.where(Product.user_id == predicate.seller_id_equals)
        bounds = predicate.price_in_range
        if bounds is not None:
            if bounds.gt is not None:
                stmt = stmt.where(Product.price > bounds.gt)
            if bounds.gte is not None:
                stmt = stmt.where(Product.price >= bounds.gte)
            if bounds.lt is not None:
                stmt = stmt.where(Product.price < bounds.lt)
            if bounds.lte is not None:
                stmt = stmt.where(Product.price <= bounds.lte)
        return stmt

    @classmethod
    def _product_select(cls) -> Select:
        return cls._catalog_select(
            Product,
            User.firstname,
            User.lastname,
            SellerProfile.user_id.label("profile_user_id"),
            SellerProfile.category.label("profile_category"),
        )

    @staticmethod
    def _product_row(product: Product, firstname, lastname, profile_user_id, profile_category) -> Row:
        return {
            "product_id": product.product_id,
            "user_id": product.user_id,
            "name": product.name,
            "description": product.description,
            "price": product.price,
            "image": product.image,
            "category": product.category,
            "seller": {
                "firstname": firstname,
                "lastname": lastname,
                "profile": None if profile_user_id is None else {"category": profile_category},
            },
        }

    @staticmethod
    def _seller_row(profile: SellerProfile, firstname, lastname) -> Row:
        return {
            "user_id": profile.user_id,
            "category": profile.category,
            "description": profile.description,
            "image_url": profile.image_url,
            "phone": profile.phone,
            "user": {"firstname": firstname, "lastname": lastname},
        }

    def _seller_select(self) -> Select:
        return (
            select(SellerProfile, User.firstname, User.lastname)
            .join(User, User.user_id == SellerProfile.user_id)
            .order_by(User.firstname, User.lastname)
        )

    # ---------- product store ----------

    def count(self, predicate: Predicate) -> int:
        stmt = self._where(self._catalog_select(func.count(Product.product_id)), predicate)
        with self.database.session() as session:
            return int(session.execute(stmt).scalar_one())

    def find(self, predicate: Predicate, limit: Optional[int] = None, offset: int = 0) -> List[Row]:
        stmt = self._where(self._product_select(), predicate).order_by(Product.name, Product.product_id)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self.database.session() as session:
            return [self._product_row(*result) for result in session.execute(stmt).all()]

    def get_product(self, product_id: str) -> Optional[Row]:
        stmt = self._product_select().where(Product.product_id == product_id)
        with self.database.session() as session:
            result = session.execute(stmt).first()
            return None if result is None else self._product_row(*result)

    # ---------- catalog reader ----------

    def list_sellers(self) -> List[Row]:
        with self.database.session() as session:
            return [self._seller_row(*result) for result in session.execute(self._seller_select()).all()]

    def get_seller(self, user_id: str) -> Optional[Row]:
        stmt = self._seller_select().where(SellerProfile.user_id == user_id)
        with self.database.session() as session:
            result = session.execute(stmt).first()
            return None if result is None else self._seller_row(*result)

    def list_categories(self) -> StringList:
        stmt = select(SellerProfile.category).distinct().order_by(SellerProfile.category)
        with self.database.session() as session:
            values = [c for c in session.execute(stmt).scalars().all() if c is not None]
        return StringList(values=values)

    def list_reviews(self, product_id: str) -> List[Row]:
        stmt = (
            select(Review, User.user_id, User.firstname, User.lastname)
            .outerjoin(User, User.user_id == Review.user_id)
            .where(Review.product_id == product_id)
            .order_by(Review.created_at, Review.review_id)
        )
        rows: List[Row] = []
        with self.database.session() as session:
            for review, author_id, firstname, lastname in session.execute(stmt).all():
                rows.append({
                    "review_id": review.review_id,
                    "user_id": review.user_id,
                    "product_id": review.product_id,
                    "rating": review.rating,
                    "review": review.review,
                    "created_at": review.created_at,
                    "user": None if author_id is None else {
                        "user_id": author_id,
                        "firstname": firstname,
                        "lastname": lastname,
                    },
                })
        return rows

    def get_product_stats(self, product_id: str) -> ProductStats:
        stmt = select(func.avg(Review.rating), func.count(Review.review_id)).where(Review.product_id == product_id)
        with self.database.session() as session:
            average, count = session.execute(stmt).one()
        return to_product_stats(average, count)

    def list_stories(self, user_id: str) -> List[Row]:
        stmt = (
            select(Story.story_id, Story.content, Story.created_at)
            .where(Story.user_id == user_id)
            .order_by(Story.created_at.desc())
        )
        with self.database.session() as session:
            return [dict(result._mapping) for result in session.execute(stmt).all()]

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self.database.session() as session:
            user = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
            if user is None:
                return None
            return UserRecord(
                user_id=user.user_id,
                firstname=user.firstname,
                lastname=user.lastname,
                email=user.email,
                password=user.password,
                user_type=user.user_type,
            )

    # ---------- catalog writer ----------

    def create_user(self, firstname: str, lastname: str, email: str, password_hash: str, user_type: str) -> str:
        user_id = str(uuid.uuid4())
        with self.database.transaction() as session:
            session.add(User(
                user_id=user_id,
                firstname=firstname,
                lastname=lastname,
                email=email,
                password=password_hash,
                user_type=user_type,
            ))
        self.logger.info(f"Created {user_type} account {user_id}")
        return user_id

    def create_story(self, user_id: str, content: str) -> str:
        story_id = str(uuid.uuid4())
        with self.database.transaction() as session:
            session.add(Story(story_id=story_id, user_id=user_id, content=content))
        self.logger.info(f"Created story {story_id} for seller {user_id}")
        return story_id

    def create_review(self, user_id: str, product_id: str, rating: int, review: str) -> str:
        review_id = str(uuid.uuid4())
        with self.database.transaction() as session:
            session.add(Review(review_id=review_id, user_id=user_id, product_id=product_id, rating=rating, review=review))
        self.logger.info(f"Created review {review_id} for product {product_id}")
        return review_id

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
        with self.database.transaction() as session:
            user = session.get(User, user_id)
            profile = session.get(SellerProfile, user_id)
            if user is None or profile is None:
                raise LookupError(f"No seller profile for user {user_id}")
            user.firstname = firstname
            user.lastname = lastname
            profile.category = category
            profile.phone = phone
            profile.description = description
            profile.image_url = image_url
        self.logger.info(f"Updated seller basics for {user_id}")

    def _owned_product(self, session, product_id: str, user_id: Optional[str] = None) -> Product:
        stmt = select(Product).where(Product.product_id == product_id)
        if user_id is not None:
            stmt = stmt.where(Product.user_id == user_id)
        product = session.execute(stmt).scalar_one_or_none()
        if product is None:
            raise LookupError(f"No product {product_id}" + (f" owned by {user_id}" if user_id else ""))
        return product

    def update_product_description(self, product_id: str, description: str) -> None:
        with self.database.transaction() as session:
            self._owned_product(session, product_id).description = description
        self.logger.info(f"Updated description of product {product_id}")

    def update_product(self, product_id: str, name: str, description: str, image: str, price: Decimal) -> None:
        with self.database.transaction() as session:
            product = self._owned_product(session, product_id)
            product.name = name
            product.description = description
            product.image = image
            product.price = price
        self.logger.info(f"Updated product {product_id}")

    def create_product(
        self,
        user_id: str,
        name: str,
        price: Decimal,
        description: str,
        image: str,
        category: Optional[str],
    ) -> str:
        product_id = str(uuid.uuid4())
        with self.database.transaction() as session:
            session.add(Product(
                product_id=product_id,
                user_id=user_id,
                name=name,
                price=price,
                description=description,
                image=image,
                category=category,
            ))
        self.logger.info(f"Created product {product_id} for seller {user_id}")
        return product_id

    def delete_product(self, product_id: str, user_id: str) -> None:
        with self.database.transaction() as session:
            session.delete(self._owned_product(session, product_id, user_id))
        self.logger.info(f"Deleted product {product_id}")
