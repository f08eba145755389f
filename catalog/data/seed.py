"""
Demo catalog data.

seed_categories() mirrors the categories every deployment starts with.
seed_sample_products() adds a small mixed catalog for local runs.
generate_synthetic_ratings() writes random ratings as real rows; it only runs
when explicitly asked for, so reads always see stored ratings and nothing else.
"""
from __future__ import annotations

import random
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from catalog.data.models import Category, Product, Rating
from catalog.utils.logger import get_logger

logger = get_logger("data.seed")

DEFAULT_CATEGORIES = ["Laptop", "Cellular", "TV", "Headphone"]

SAMPLE_PRODUCTS: List[Dict] = [
    {
        "name": "MacBook Air 13", "brand": "Apple", "price": "1099.00", "category": "Laptop",
        "memory": "8GB", "screen_size": "13.6", "battery_capacity": "52.6Wh",
        "operating_system": "macOS", "color": "Silver",
    },
    {
        "name": "ThinkPad X1 Carbon", "brand": "Lenovo", "price": "1649.00", "category": "Laptop",
        "memory": "16GB", "screen_size": "14", "battery_capacity": "57Wh",
        "operating_system": "Windows", "color": "Black",
    },
    {
        "name": "Galaxy S24", "brand": "Samsung", "price": "799.99", "category": "Cellular",
        "memory": "128GB", "screen_size": "6.2", "battery_capacity": "4000mAh",
        "operating_system": "Android", "color": "Black",
    },
    {
        "name": "iPhone 15", "brand": "Apple", "price": "899.00", "category": "Cellular",
        "memory": "128GB", "screen_size": "6.1", "battery_capacity": "3349mAh",
        "operating_system": "iOS", "color": "Blue",
    },
    {
        "name": "Bravia XR 55", "brand": "Sony", "price": "1299.00", "category": "TV",
        "screen_size": "55", "operating_system": "Google TV", "color": "Black",
    },
    {
        "name": "WH-1000XM5", "brand": "Sony", "price": "399.99", "category": "Headphone",
        "battery_capacity": "30h", "color": "Silver",
    },
]


def seed_categories(db: Session, names: Optional[List[str]] = None) -> Dict[str, Category]:
    """Create missing categories; returns all of them keyed by name."""
    existing = {c.name.lower(): c for c in db.query(Category).all()}
    for name in names or DEFAULT_CATEGORIES:
        if name.lower() not in existing:
            category = Category(name=name)
            db.add(category)
            existing[name.lower()] = category
    db.flush()
    return {c.name: c for c in existing.values()}


def seed_sample_products(db: Session) -> List[Product]:
    """Add SAMPLE_PRODUCTS unless the catalog already has products."""
    if db.query(Product).count() > 0:
        logger.info("Products already exist. Skipping sample products.")
        return []

    categories = {name.lower(): c for name, c in seed_categories(db).items()}
    products = []
    for item in SAMPLE_PRODUCTS:
        fields = dict(item)
        category = categories[fields.pop("category").lower()]
        fields["price"] = Decimal(fields["price"])
        product = Product(category=category, **fields)
        db.add(product)
        products.append(product)
    db.flush()
    logger.info("Seeded %d sample products", len(products))
    return products


def generate_synthetic_ratings(
    db: Session,
    users: int = 5,
    seed: Optional[int] = None,
    only_unrated: bool = True,
) -> int:
    """
    Write random 1-5 ratings from `users` synthetic user ids.

    Demo data only. With only_unrated, products that already have ratings are
    left alone. Returns the number of ratings written.
    """
    rng = random.Random(seed)
    written = 0
    for product in db.query(Product).order_by(Product.id).all():
        if only_unrated and product.ratings:
            continue
        rated_by = {r.user_id for r in product.ratings}
        for user_id in range(1, users + 1):
            if user_id in rated_by:
                continue
            db.add(Rating(product=product, user_id=user_id, value=rng.randint(1, 5)))
            written += 1
    db.flush()
    logger.info("Generated %d synthetic ratings", written)
    return written
