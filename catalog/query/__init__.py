"""Filter composition, price bounds, rating aggregation and sort/page planning."""

from catalog.query.errors import (
    CatalogQueryError,
    CatalogStoreError,
    InvalidFilterProperty,
    InvalidFilterValue,
    InvalidPagination,
    InvalidSortOrDirection,
    NoMatchingRecords,
    ResourceNotFound,
)
from catalog.query.predicates import NEUTRAL, FilterCriteria, compose
from catalog.query.planner import SortPagePlanner
from catalog.query.price_bounds import PriceBounds, resolve_price_bounds
from catalog.query.ratings import average_rating
from catalog.query.validation import PageRequest, SortDirection, validate_page_request

__all__ = [
    'CatalogQueryError',
    'CatalogStoreError',
    'InvalidFilterProperty',
    'InvalidFilterValue',
    'InvalidPagination',
    'InvalidSortOrDirection',
    'NoMatchingRecords',
    'ResourceNotFound',
    'NEUTRAL',
    'FilterCriteria',
    'compose',
    'SortPagePlanner',
    'PriceBounds',
    'resolve_price_bounds',
    'average_rating',
    'PageRequest',
    'SortDirection',
    'validate_page_request',
]
