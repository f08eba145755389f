"""
Sort & page planning.

Two ways to produce an ordered page:

- Pushdown: the sort key is a stored column, so ORDER BY/LIMIT/OFFSET run in SQL.
- Rating sort: the key is the mean of a one-to-many relation. DatabaseRatingSort
  orders by AVG() over an outer join; InMemoryRatingSort pulls every match,
  aggregates in Python and slices the page out itself.

Every strategy breaks ties by ascending product id, so equal keys keep the
same relative order in both directions and across repeated calls.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload
from sqlalchemy.sql.elements import ColumnElement

from catalog.data.models import Product
from catalog.query.errors import CatalogStoreError, InvalidPagination, InvalidSortOrDirection
from catalog.query.ratings import average_rating, average_rating_expression
from catalog.query.validation import STORED_SORT_KEYS, PageRequest
from catalog.utils.logger import get_logger

logger = get_logger("query.planner")


def total_pages_for(total_elements: int, page_size: int) -> int:
    return math.ceil(total_elements / page_size) if total_elements else 0


def check_page_in_range(page: PageRequest, total_elements: int) -> int:
    """Return the page count, or raise when page.page_number is past the end."""
    total_pages = total_pages_for(total_elements, page.page_size)
    if page.page_number >= max(total_pages, 1):
        raise InvalidPagination(
            f"Page Number {page.page_number} Exceeds totalPages {total_pages}",
            parameter="pageNumber",
        )
    return total_pages


@dataclass
class PlannedPage:
    products: List[Product]
    total_elements: int
    total_pages: int


class SortStrategy:
    """Base strategy: count, range-check the page, then fetch it."""

    name = "base"

    def execute(self, db: Session, predicate: ColumnElement, page: PageRequest) -> PlannedPage:
        try:
            total = db.query(func.count(Product.id)).filter(predicate).scalar() or 0
            total_pages = check_page_in_range(page, total)
            query = self.page_query(db, predicate, page)
            logger.debug("Catalog page query (%s): %s", self.name, query.statement)
            products = query.all()
        except SQLAlchemyError as exc:
            raise CatalogStoreError(f"{self.name} page query", exc) from exc
        return PlannedPage(products=products, total_elements=total, total_pages=total_pages)

    def page_query(self, db: Session, predicate: ColumnElement, page: PageRequest) -> Query:
        raise NotImplementedError

    @staticmethod
    def _base_query(db: Session, predicate: ColumnElement) -> Query:
        # selectinload runs while the session is open; nothing lazy-loads after it closes
        return (
            db.query(Product)
            .options(selectinload(Product.category), selectinload(Product.ratings))
            .filter(predicate)
        )


class PushdownSort(SortStrategy):
    """ORDER BY a stored column, paged by the database."""

    name = "pushdown"

    @staticmethod
    def sort_column(sort_by: str):
        attribute = STORED_SORT_KEYS.get(sort_by)
        column = getattr(Product, attribute, None) if attribute else None
        if column is None:
            raise InvalidSortOrDirection(f"No property '{sort_by}' found for type 'Product'", parameter="sortBy")
        return column

    def page_query(self, db: Session, predicate: ColumnElement, page: PageRequest) -> Query:
        column = self.sort_column(page.sort_by)
        order = column.desc() if page.descending else column.asc()
        return (
            self._base_query(db, predicate)
            .order_by(order, Product.id.asc())
            .offset(page.offset)
            .limit(page.page_size)
        )


class DatabaseRatingSort(SortStrategy):
    """GROUP BY product, ORDER BY coalesce(AVG(rating), 0), paged by the database."""

    name = "database-rating"

    def page_query(self, db: Session, predicate: ColumnElement, page: PageRequest) -> Query:
        rating = average_rating_expression()
        order = rating.desc() if page.descending else rating.asc()
        return (
            self._base_query(db, predicate)
            .outerjoin(Product.ratings)
            .group_by(Product.id)
            .order_by(order, Product.id.asc())
            .offset(page.offset)
            .limit(page.page_size)
        )


class InMemoryRatingSort(SortStrategy):
    """Fetch every match in id order, sort by computed rating (stable), slice the page."""

    name = "memory-rating"

    def execute(self, db: Session, predicate: ColumnElement, page: PageRequest) -> PlannedPage:
        try:
            products = self._base_query(db, predicate).order_by(Product.id.asc()).all()
        except SQLAlchemyError as exc:
            raise CatalogStoreError(f"{self.name} fetch", exc) from exc

        total = len(products)
        total_pages = check_page_in_range(page, total)
        # sorted() is stable, and stays stable with reverse=True
        ordered = sorted(products, key=lambda p: average_rating(p.ratings), reverse=page.descending)
        window = ordered[page.offset:page.offset + page.page_size]
        return PlannedPage(products=window, total_elements=total, total_pages=total_pages)


RATING_STRATEGIES = {
    "database": DatabaseRatingSort,
    "memory": InMemoryRatingSort,
}


class SortPagePlanner:
    """Pick a strategy for the requested sort key and run it."""

    def __init__(self, rating_sort_strategy: str = "database"):
        if rating_sort_strategy not in RATING_STRATEGIES:
            raise ValueError(f"Unknown rating sort strategy: {rating_sort_strategy}")
        self.pushdown = PushdownSort()
        self.rating = RATING_STRATEGIES[rating_sort_strategy]()

    def strategy_for(self, page: PageRequest) -> SortStrategy:
        return self.rating if page.sorts_by_rating else self.pushdown

    def plan(self, db: Session, predicate: ColumnElement, page: PageRequest) -> PlannedPage:
        strategy = self.strategy_for(page)
        logger.info(
            "Planning page %d (size %d) sorted by %s %s via %s",
            page.page_number, page.page_size, page.sort_by, page.direction.value, strategy.name,
        )
        return strategy.execute(db, predicate, page)
