"""
Product search: the entry point that ties the query engine together.

criteria -> non-price predicate -> price bounds -> full predicate
         -> sort/page planner -> page envelope
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from catalog.core.config import CatalogConfig, get_config
from catalog.data.models import Product
from catalog.query.assembler import assemble_page, to_product_response
from catalog.query.errors import CatalogStoreError, ResourceNotFound
from catalog.query.planner import SortPagePlanner
from catalog.query.predicates import FilterCriteria, compose
from catalog.query.price_bounds import resolve_price_bounds
from catalog.query.validation import PageRequest, validate_price_range
from catalog.schemas import ProductPage, ProductResponse
from catalog.utils.logger import describe_params, get_logger

logger = get_logger("services.product_search")


class ProductSearchService:
    """Request-scoped read service over one open session."""

    def __init__(self, db: Session, config: Optional[CatalogConfig] = None):
        self.db = db
        self.config = config or get_config()
        self.planner = SortPagePlanner(self.config.rating_sort_strategy)

    def find_products(self, criteria: FilterCriteria, page: PageRequest) -> ProductPage:
        """
        Run a filtered, sorted, paginated product search.

        Raises:
            InvalidFilterValue: minPrice > maxPrice
            NoMatchingRecords: nothing matches the non-price filters
            InvalidPagination: page_number is past the last page
            CatalogStoreError: the database failed
        """
        validate_price_range(criteria.min_price, criteria.max_price)
        logger.info(
            "Product search: %s | page=%d size=%d sort=%s,%s",
            describe_params(criteria.as_params()),
            page.page_number, page.page_size, page.sort_by, page.direction.value,
        )

        base = criteria.base_predicate()
        bounds = resolve_price_bounds(self.db, base, criteria.min_price, criteria.max_price)
        predicate = compose(base, bounds.predicate())

        planned = self.planner.plan(self.db, predicate, page)
        logger.info(
            "Product search matched %d products (%d pages), returning %d",
            planned.total_elements, planned.total_pages, len(planned.products),
        )
        return assemble_page(planned, page, bounds)

    def get_product(self, product_id: int) -> ProductResponse:
        try:
            product = (
                self.db.query(Product)
                .options(selectinload(Product.category), selectinload(Product.ratings))
                .filter(Product.id == product_id)
                .one_or_none()
            )
        except SQLAlchemyError as exc:
            raise CatalogStoreError("product lookup", exc) from exc
        if product is None:
            raise ResourceNotFound.for_entity("Product", "id", product_id)
        return to_product_response(product)
