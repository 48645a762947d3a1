#!/usr/bin/env python3
"""
seed_data.py

Writes the marketplace fixture data either to CSVs under a local folder
(default: sample_data) or into the configured SQL database.

Entities:
- users, seller_profiles, products, reviews, stories

Run:
  python -m haven.backend.seed_data --target csv
  python -m haven.backend.seed_data --target sql --database-url sqlite:///haven.db
"""

from __future__ import annotations

import argparse
import csv
import os
import sys
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from haven.auth.credentials import hash_password
from haven.config import get_config
from haven.data.backends.orm import Database, Product, Review, SellerProfile, Story, User

# -----------------------------
# Fixtures
# -----------------------------

PEDRO = "7baf7cfb-84b9-47ba-b554-a146daefec3e"
ANA = "0e2a45e8-7d06-4b89-8a5e-2790e2b79338"
CARLOS = "3958dc9e-712f-4377-85e9-fec4b6a6442a"

_FIXTURE_NS = uuid.UUID("5b0c2f64-4d1e-4c55-9a47-2f1f3c8f6a10")


def fixture_id(kind: str, name: str) -> str:
    """Stable id so re-seeding finds the rows it wrote last time."""
    return str(uuid.uuid5(_FIXTURE_NS, f"{kind}:{name}"))


USERS = [
    {"user_id": PEDRO, "firstname": "Pedro", "lastname": "Torres", "email": "pedro.torres@example.com", "user_type": "seller"},
    {"user_id": ANA, "firstname": "Ana", "lastname": "Gomez", "email": "ana.gomez@example.com", "user_type": "seller"},
    {"user_id": CARLOS, "firstname": "Carlos", "lastname": "Ruiz", "email": "carlos.ruiz@example.com", "user_type": "user"},
]

SELLER_PROFILES = [
    {"user_id": PEDRO, "category": "Woodwork", "description": "Artisan of wood from Panguipulli.",
     "image_url": "/images/sellers/vendedormadera.png", "phone": "123-456-7890"},
    {"user_id": ANA, "category": "Ceramics", "description": "Creator of fine pottery.",
     "image_url": "/images/sellers/vendedoramujer.png", "phone": "098-765-4321"},
]

PRODUCTS = [
    {"user_id": PEDRO, "name": "Hand-carved Wooden Bowl", "price": Decimal("25.00"),
     "description": "Hand-carved from native wood.",
     "image": "/images/productos/madera/Hand-carved Wooden Bowl.png", "category": "Woodwork"},
    {"user_id": PEDRO, "name": "Beaded Earrings", "price": Decimal("35.50"),
     "description": "Durable and beautiful earrings.",
     "image": "/images/productos/joyeria/Beaded Earrings.png", "category": "Jewelry"},
    {"user_id": ANA, "name": "Clay Coffee Mug", "price": Decimal("18.00"),
     "description": "Perfect for your morning coffee.",
     "image": "/images/productos/alfarero/Clay Coffee Mug.png", "category": "Pottery"},
    {"user_id": ANA, "name": "Mini Clay Vase", "price": Decimal("42.00"),
     "description": "A beautiful centerpiece for any room.",
     "image": "/images/productos/alfarero/Mini Clay Vase.png", "category": "Pottery"},
    {"user_id": PEDRO, "name": "Chilean Coastline", "price": Decimal("12.00"),
     "description": "A beautiful painting made with love",
     "image": "/images/productos/pintura/Chilean Coastline.png", "category": "Painting"},
    {"user_id": ANA, "name": "Woven Table Runner", "price": Decimal("22.00"),
     "description": "Ideal for family tables that join kindness.",
     "image": "/images/productos/telas/Woven Table Runner.png", "category": "Textiles"},
]
for _p in PRODUCTS:
    _p["product_id"] = fixture_id("product", _p["name"])

REVIEWS = [
    {"user_id": CARLOS, "product": "Hand-carved Wooden Bowl", "rating": 5,
     "review": "Beautiful grain and a perfect finish.", "created_at": datetime(2025, 3, 2, 10, 0, tzinfo=timezone.utc)},
    {"user_id": ANA, "product": "Hand-carved Wooden Bowl", "rating": 4,
     "review": "Solid piece, a little smaller than expected.", "created_at": datetime(2025, 3, 5, 16, 30, tzinfo=timezone.utc)},
    {"user_id": CARLOS, "product": "Clay Coffee Mug", "rating": 4,
     "review": "Keeps my coffee warm and feels great in hand.", "created_at": datetime(2025, 3, 9, 8, 15, tzinfo=timezone.utc)},
]
for _r in REVIEWS:
    _r["product_id"] = fixture_id("product", _r.pop("product"))
    _r["review_id"] = fixture_id("review", f"{_r['user_id']}:{_r['product_id']}")

STORIES = [
    {"user_id": PEDRO, "content": "I learned to carve native wood in Panguipulli from my grandfather.",
     "created_at": datetime(2025, 2, 1, 12, 0, tzinfo=timezone.utc)},
    {"user_id": PEDRO, "content": "This winter I started painting the coastline I grew up on.",
     "created_at": datetime(2025, 2, 20, 12, 0, tzinfo=timezone.utc)},
    {"user_id": ANA, "content": "Every piece of pottery starts with clay from the river near home.",
     "created_at": datetime(2025, 2, 10, 9, 0, tzinfo=timezone.utc)},
]
for _s in STORIES:
    _s["story_id"] = fixture_id("story", f"{_s['user_id']}:{_s['created_at'].isoformat()}")

USER_HEADERS = ["user_id", "firstname", "lastname", "email", "password", "user_type"]
PROFILE_HEADERS = ["user_id", "category", "description", "image_url", "phone"]
PRODUCT_HEADERS = ["product_id", "user_id", "name", "description", "price", "image", "category"]
REVIEW_HEADERS = ["review_id", "user_id", "product_id", "rating", "review", "created_at"]
STORY_HEADERS = ["story_id", "user_id", "content", "created_at"]


# -----------------------------
# Writers
# -----------------------------

def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore")
        w.writeheader()
        for r in rows:
            w.writerow({k: v.isoformat() if isinstance(v, datetime) else v for k, v in r.items()})


def user_rows(password_hash: str) -> List[Dict]:
    return [{**u, "password": password_hash} for u in USERS]


def seed_sql(database: Database, password_hash: str) -> Dict[str, int]:
    """Insert fixtures that are not there yet; returns rows added per table."""
    added = {"users": 0, "seller_profiles": 0, "products": 0, "reviews": 0, "stories": 0}
    with database.transaction() as session:
        for row in user_rows(password_hash):
            if session.get(User, row["user_id"]) is None:
                session.add(User(**row))
                added["users"] += 1
        session.flush()
        for row in SELLER_PROFILES:
            if session.get(SellerProfile, row["user_id"]) is None:
                session.add(SellerProfile(**row))
                added["seller_profiles"] += 1
        for row in PRODUCTS:
            if session.get(Product, row["product_id"]) is None:
                session.add(Product(**row))
                added["products"] += 1
        session.flush()
        for row in REVIEWS:
            if session.get(Review, row["review_id"]) is None:
                session.add(Review(**row))
                added["reviews"] += 1
        for row in STORIES:
            if session.get(Story, row["story_id"]) is None:
                session.add(Story(**row))
                added["stories"] += 1
    return added


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Write marketplace fixture data to CSVs or a SQL database.")
    parser.add_argument("--target", choices=["csv", "sql"], default=config.default_seed_target)
    parser.add_argument("--output-dir", type=str, default=config.data_dir, help="CSV folder (csv target).")
    parser.add_argument("--database-url", type=str, default=config.database_url, help="SQLAlchemy URL (sql target).")
    parser.add_argument("--hash-rounds", type=int, default=config.default_seed_hash_rounds, help="bcrypt cost factor.")
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    password_hash = hash_password(config.default_seed_password, rounds=args.hash_rounds)

    if args.target == "sql":
        database = Database(args.database_url)
        try:
            database.create_all()
            added = seed_sql(database, password_hash)
        finally:
            database.dispose()
        print(f"Seeded database {args.database_url}")
        print(" " + " | ".join(f"{table}: {count}" for table, count in added.items()))
        return 0

    outdir = args.output_dir
    ensure_dir(outdir)

    # file paths
    files = {
        "users": os.path.join(outdir, "users.csv"),
        "seller_profiles": os.path.join(outdir, "seller_profiles.csv"),
        "products": os.path.join(outdir, "products.csv"),
        "reviews": os.path.join(outdir, "reviews.csv"),
        "stories": os.path.join(outdir, "stories.csv"),
    }
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    write_csv(files["users"], user_rows(password_hash), USER_HEADERS)
    write_csv(files["seller_profiles"], SELLER_PROFILES, PROFILE_HEADERS)
    write_csv(files["products"], PRODUCTS, PRODUCT_HEADERS)
    write_csv(files["reviews"], REVIEWS, REVIEW_HEADERS)
    write_csv(files["stories"], STORIES, STORY_HEADERS)

    # simple summary
    print(f"Generated data in {outdir}")
    print(f" users: {len(USERS)} | seller_profiles: {len(SELLER_PROFILES)} | products: {len(PRODUCTS)}")
    print(f" reviews: {len(REVIEWS)} | stories: {len(STORIES)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
