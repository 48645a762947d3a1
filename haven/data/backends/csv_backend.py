from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from ...config import get_config
from ...logging import get_logger
from ..interface import DataAccess, Row
from ..mappers import to_product_stats
from ..models import Predicate, ProductStats, StringList, UserRecord

USER_COLUMNS = ["user_id", "firstname", "lastname", "email", "password", "user_type"]
PROFILE_COLUMNS = ["user_id", "category", "description", "image_url", "phone"]
PRODUCT_COLUMNS = ["product_id", "user_id", "name", "description", "price", "image", "category"]
REVIEW_COLUMNS = ["review_id", "user_id", "product_id", "rating", "review", "created_at"]
STORY_COLUMNS = ["story_id", "user_id", "content", "created_at"]


@dataclass
class _Tables:
    users: pd.DataFrame
    profiles: pd.DataFrame
    products: pd.DataFrame
    reviews: pd.DataFrame
    stories: pd.DataFrame
    # Products pre-joined with their seller and seller profile
    catalog: pd.DataFrame  # columns after join; see _build_catalog()


def _nulls_to_none(df: pd.DataFrame) -> pd.DataFrame:
    return df.astype(object).where(df.notna(), None)


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


class CsvDataAccess(DataAccess):
    """
    CSV-backed, read-only implementation.
    - Loads CSVs from `data_dir` once at construction.
    - Every method call performs a fresh filter pass over the loaded frames
      (so each UI interaction triggers new work, mirroring a DB query).
    """

    def __init__(self, data_dir: Union[str, Path, None] = None) -> None:
        if data_dir is None:
            config = get_config()
            data_dir = config.data_dir

        self.data_dir = Path(data_dir)
        self.logger = get_logger(__name__)

        # If the path is relative, make it relative to the repository root
        if not self.data_dir.is_absolute():
            current = Path.cwd()
            repo_root = None

            # Look up the directory tree for pyproject.toml
            for parent in [current] + list(current.parents):
                if (parent / "pyproject.toml").exists():
                    repo_root = parent
                    break

            if repo_root:
                self.data_dir = repo_root / self.data_dir
            else:
                # Fallback to current directory
                self.data_dir = current / self.data_dir

        self._tables = self._load_tables(self.data_dir)
        self.logger.debug(
            f"Loaded {len(self._tables.products)} products and {len(self._tables.profiles)} sellers from {self.data_dir}"
        )

    # ---------- loading / join helpers ----------

    @staticmethod
    def _read(path: Path, columns: List[str]) -> pd.DataFrame:
        if not path.exists():
            return pd.DataFrame(columns=columns)
        df = pd.read_csv(path, dtype=str)
        for column in columns:
            if column not in df.columns:
                df[column] = None
        return _nulls_to_none(df[columns])

    @staticmethod
    def _load_tables(data_dir: Path) -> _Tables:
        # Check if data directory exists
        if not data_dir.exists():
            raise FileNotFoundError(
                f"Data directory not found: {data_dir}\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m haven.backend.seed_data --target csv\n"
                f"  2. Set DATA_DIR environment variable to point to your data directory\n"
                f"  3. Create a .env file with DATA_DIR=/path/to/your/data"
            )

        # Required CSV files
        required_files = ["users.csv", "seller_profiles.csv", "products.csv"]
        missing_files = [f for f in required_files if not (data_dir / f).exists()]

        if missing_files:
            raise FileNotFoundError(
                f"Required CSV files missing in {data_dir}:\n"
                f"  Missing: {', '.join(missing_files)}\n"
                f"  Expected files: {', '.join(required_files)}\n\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m haven.backend.seed_data --target csv\n"
                f"  2. Ensure your data directory contains all required CSV files\n"
                f"  3. Set DATA_DIR environment variable to point to a directory with the required files"
            )

        try:
            users = CsvDataAccess._read(data_dir / "users.csv", USER_COLUMNS)
            profiles = CsvDataAccess._read(data_dir / "seller_profiles.csv", PROFILE_COLUMNS)
            products = CsvDataAccess._read(data_dir / "products.csv", PRODUCT_COLUMNS)

            # Optional tables
            reviews = CsvDataAccess._read(data_dir / "reviews.csv", REVIEW_COLUMNS)
            stories = CsvDataAccess._read(data_dir / "stories.csv", STORY_COLUMNS)

            products["price"] = products["price"].map(Decimal)
            reviews["rating"] = reviews["rating"].map(int)
            reviews["created_at"] = reviews["created_at"].map(_parse_ts)
            stories["created_at"] = stories["created_at"].map(_parse_ts)
            reviews = _nulls_to_none(reviews)
            stories = _nulls_to_none(stories)

        except Exception as e:
            raise RuntimeError(
                f"Error reading CSV files from {data_dir}: {e}\n"
                f"Please check that the CSV files are valid and readable."
            ) from e

        catalog = CsvDataAccess._build_catalog(products, users, profiles)

        return _Tables(
            users=users,
            profiles=profiles,
            products=products,
            reviews=reviews,
            stories=stories,
            catalog=catalog,
        )

    @staticmethod
    def _build_catalog(products: pd.DataFrame, users: pd.DataFrame, profiles: pd.DataFrame) -> pd.DataFrame:
        df = (
            products.merge(users[["user_id", "firstname", "lastname"]], on="user_id", how="left")
                    .merge(
                        profiles[["user_id", "category"]].rename(columns={"category": "profile_category"}),
                        on="user_id",
                        how="left",
                    )
                    .copy()
        )
        df["has_profile"] = df["user_id"].isin(profiles["user_id"])
        return _nulls_to_none(df)

    # ---------- contract helpers ----------

    def _filtered(self, predicate: Predicate) -> pd.DataFrame:
        df = self._tables.catalog

        mask = pd.Series(True, index=df.index)
        if predicate.seller_category_equals is not None:
            mask &= (df["profile_category"] == predicate.seller_category_equals)
        if predicate.seller_id_equals is not None:
            mask &= (df["user_id"] == predicate.seller_id_equals)
        if predicate.price_in_range is not None:
            mask &= df["price"].map(predicate.price_in_range.contains).astype(bool)

        return df.loc[mask]

    @staticmethod
    def _to_row(record: Dict[str, Any]) -> Row:
        profile = {"category": record["profile_category"]} if record["has_profile"] else None
        return {
            "product_id": record["product_id"],
            "user_id": record["user_id"],
            "name": record["name"],
            "description": record["description"],
            "price": record["price"],
            "image": record["image"],
            "category": record["category"],
            "seller": {
                "firstname": record["firstname"],
                "lastname": record["lastname"],
                "profile": profile,
            },
        }

    def _user_names(self) -> Dict[str, Dict[str, Any]]:
        users = self._tables.users
        return {
            rec["user_id"]: {"user_id": rec["user_id"], "firstname": rec["firstname"], "lastname": rec["lastname"]}
            for rec in users.to_dict(orient="records")
        }

    def _seller_rows(self, profiles: pd.DataFrame) -> List[Row]:
        names = self._user_names()
        rows: List[Row] = []
        for rec in profiles.to_dict(orient="records"):
            user = names.get(rec["user_id"], {})
            rows.append({**rec, "user": {"firstname": user.get("firstname"), "lastname": user.get("lastname")}})
        rows.sort(key=lambda r: (r["user"]["firstname"] or "", r["user"]["lastname"] or ""))
        return rows

    # ---------- interface implementation ----------

    def count(self, predicate: Predicate) -> int:
        return int(len(self._filtered(predicate)))

    def find(self, predicate: Predicate, limit: Optional[int] = None, offset: int = 0) -> List[Row]:
        df = self._filtered(predicate).sort_values(["name", "product_id"], kind="mergesort")
        end = None if limit is None else offset + limit
        return [self._to_row(rec) for rec in df.iloc[offset:end].to_dict(orient="records")]

    def get_product(self, product_id: str) -> Optional[Row]:
        df = self._tables.catalog
        match = df.loc[df["product_id"] == product_id]
        if match.empty:
            return None
        return self._to_row(match.to_dict(orient="records")[0])

    def list_sellers(self) -> List[Row]:
        return self._seller_rows(self._tables.profiles)

    def get_seller(self, user_id: str) -> Optional[Row]:
        profiles = self._tables.profiles
        rows = self._seller_rows(profiles.loc[profiles["user_id"] == user_id])
        return rows[0] if rows else None

    def list_categories(self) -> StringList:
        categories = self._tables.profiles["category"].dropna().unique().tolist()
        return StringList(values=sorted(categories))

    def list_reviews(self, product_id: str) -> List[Row]:
        reviews = self._tables.reviews
        names = self._user_names()
        rows = [
            {**rec, "user": names.get(rec["user_id"])}
            for rec in reviews.loc[reviews["product_id"] == product_id].to_dict(orient="records")
        ]
        rows.sort(key=lambda r: (r["created_at"] is None, r["created_at"]))
        return rows

    def get_product_stats(self, product_id: str) -> ProductStats:
        reviews = self._tables.reviews
        ratings = reviews.loc[reviews["product_id"] == product_id, "rating"].tolist()
        if not ratings:
            return to_product_stats(None, 0)
        return to_product_stats(Decimal(sum(ratings)) / Decimal(len(ratings)), len(ratings))

    def list_stories(self, user_id: str) -> List[Row]:
        stories = self._tables.stories
        rows = stories.loc[stories["user_id"] == user_id].to_dict(orient="records")
        rows.sort(key=lambda r: (r["created_at"] is not None, r["created_at"]), reverse=True)
        return rows

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        users = self._tables.users
        match = users.loc[users["email"] == email]
        if match.empty:
            return None
        return UserRecord(**match.to_dict(orient="records")[0])
