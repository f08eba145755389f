#!/usr/bin/env python3
"""
Seed the catalog database with demo data.

Creates missing tables, the default categories and a handful of sample
products. Synthetic ratings are opt-in and written as real rows.

Usage:
  python scripts/seed_catalog.py                                  # categories + sample products
  python scripts/seed_catalog.py --categories-only
  python scripts/seed_catalog.py --synthetic-ratings --seed 42    # also rate unrated products
"""

import argparse
import sys
from pathlib import Path

# Allow running from repo root or scripts/ dir
_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(_ROOT))

from catalog.data.database import Base, SessionLocal, engine
from catalog.data.seed import generate_synthetic_ratings, seed_categories, seed_sample_products
from catalog.utils.logger import get_logger

logger = get_logger("scripts.seed_catalog")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the catalog database with demo data")
    parser.add_argument("--categories-only", action="store_true", help="Only create the default categories")
    parser.add_argument("--synthetic-ratings", action="store_true",
                        help="Write random 1-5 ratings for products that have none")
    parser.add_argument("--users", type=int, default=5, help="Synthetic raters per product (default: 5)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for synthetic ratings")
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_categories(db)
        if not args.categories_only:
            seed_sample_products(db)
        if args.synthetic_ratings:
            generate_synthetic_ratings(db, users=args.users, seed=args.seed)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        return 1
    finally:
        db.close()

    logger.info("Seeding complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
