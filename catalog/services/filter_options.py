"""
Filter options: which attribute values remain selectable under a filter.

Uses the same predicate composition and price resolution as product search,
so the options shown next to a result page describe exactly that result set.
"""
from __future__ import annotations

from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.data.models import Category, Product
from catalog.query.errors import CatalogStoreError
from catalog.query.predicates import FilterCriteria, compose
from catalog.query.price_bounds import resolve_price_bounds
from catalog.query.validation import validate_price_range
from catalog.schemas import FilterOptions
from catalog.utils.logger import describe_params, get_logger

logger = get_logger("services.filter_options")


class FilterOptionsService:

    def __init__(self, db: Session):
        self.db = db

    def _distinct(self, column, predicate) -> List[str]:
        rows = (
            self.db.query(column)
            .filter(predicate, column.isnot(None))
            .distinct()
            .order_by(column)
            .all()
        )
        return [value for (value,) in rows]

    def get_filter_options(self, criteria: FilterCriteria) -> FilterOptions:
        validate_price_range(criteria.min_price, criteria.max_price)
        logger.info("Filter options: %s", describe_params(criteria.as_params()))

        base = criteria.base_predicate()
        bounds = resolve_price_bounds(self.db, base, criteria.min_price, criteria.max_price)
        predicate = compose(base, bounds.predicate())

        try:
            categories = (
                self.db.query(Category.name)
                .join(Product, Product.category_id == Category.id)
                .filter(predicate)
                .distinct()
                .order_by(Category.name)
                .all()
            )
            return FilterOptions(
                brands=self._distinct(Product.brand, predicate),
                prices=[bounds.effective_min, bounds.effective_max],
                colors=self._distinct(Product.color, predicate),
                memories=self._distinct(Product.memory, predicate),
                screen_sizes=self._distinct(Product.screen_size, predicate),
                battery_capacities=self._distinct(Product.battery_capacity, predicate),
                operating_systems=self._distinct(Product.operating_system, predicate),
                categories=[name for (name,) in categories],
            )
        except SQLAlchemyError as exc:
            raise CatalogStoreError("filter options", exc) from exc
