"""Tests for average rating aggregation."""

import pytest
from sqlalchemy import func

from catalog.data.models import Product, Rating
from catalog.query.ratings import UNRATED, average_rating, average_rating_expression


class TestAverageRating:
    @pytest.mark.parametrize("ratings", [[], None, ()])
    def test_unrated_is_exactly_zero(self, ratings):
        assert average_rating(ratings) == 0.0
        assert UNRATED == 0.0

    def test_mean_of_values(self):
        assert average_rating([5, 4]) == 4.5
        assert average_rating([4, 5, 3]) == 4.0

    def test_accepts_rating_rows(self):
        assert average_rating([Rating(value=3), Rating(value=4)]) == 3.5

    def test_unrated_product_is_deterministic(self, db, catalog):
        product = db.get(Product, catalog["iPhone 15"])
        results = {average_rating(product.ratings) for _ in range(20)}
        assert results == {0.0}


class TestAverageRatingExpression:
    def test_matches_python_aggregate(self, db, catalog):
        rows = (
            db.query(Product.id, average_rating_expression())
            .outerjoin(Product.ratings)
            .group_by(Product.id)
            .all()
        )
        assert len(rows) == len(catalog)
        for product_id, sql_average in rows:
            product = db.get(Product, product_id)
            assert sql_average == pytest.approx(average_rating(product.ratings))

    def test_rating_count_unchanged_by_reads(self, db, catalog):
        before = db.query(func.count(Rating.id)).scalar()
        product = db.get(Product, catalog["Galaxy Buds"])
        average_rating(product.ratings)
        assert db.query(func.count(Rating.id)).scalar() == before
