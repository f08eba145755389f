"""
Request parameter validation.

Raw query-string values are parsed here, before any SQL is built. A bad value
is reported with the parameter name; it is never replaced by a default.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import AbstractSet, Iterable, Optional, Union

from catalog.query.errors import (
    InvalidFilterProperty,
    InvalidFilterValue,
    InvalidPagination,
    InvalidSortOrDirection,
)

RATING_SORT_KEY = "rating"

# Public sort key -> Product attribute for stored, sortable columns
STORED_SORT_KEYS = {
    "id": "id",
    "name": "name",
    "brand": "brand",
    "price": "price",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

SORT_KEY_ALIASES = {
    "rating": RATING_SORT_KEY,
    "ratings": RATING_SORT_KEY,
}

PRODUCT_SORT_KEYS = frozenset(STORED_SORT_KEYS) | {RATING_SORT_KEY}

FILTER_PARAMETERS = frozenset({
    "name", "brand", "minPrice", "maxPrice", "color", "memory", "screenSize",
    "batteryCapacity", "operatingSystem", "category",
})
PAGINATION_PARAMETERS = frozenset({"pageNumber", "pageSize", "sortDir", "sortBy"})

PRODUCT_SEARCH_PARAMETERS = FILTER_PARAMETERS | PAGINATION_PARAMETERS
FILTER_OPTIONS_PARAMETERS = FILTER_PARAMETERS


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, token: Optional[str]) -> "SortDirection":
        normalized = (token or "").strip().lower()
        for direction in cls:
            if direction.value == normalized:
                return direction
        raise InvalidSortOrDirection(
            f"Invalid value '{token}' for orders given; Has to be either 'desc' or 'asc' (case insensitive)",
            parameter="sortDir",
        )


@dataclass(frozen=True)
class PageRequest:
    page_number: int
    page_size: int
    direction: SortDirection
    sort_by: str

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size

    @property
    def sorts_by_rating(self) -> bool:
        return self.sort_by == RATING_SORT_KEY

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


def _parse_int(value: Union[str, int, None], parameter: str) -> int:
    if isinstance(value, bool):
        raise InvalidPagination(f"{parameter} must be an integer", parameter=parameter)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidPagination(f"{parameter} must be an integer, got '{value}'", parameter=parameter)


def resolve_sort_key(sort_by: Optional[str], allowed: AbstractSet[str] = PRODUCT_SORT_KEYS) -> str:
    """Map a requested sort key (aliases included) onto the endpoint's allow-list."""
    key = (sort_by or "").strip()
    key = SORT_KEY_ALIASES.get(key.lower(), key)
    if key not in allowed:
        raise InvalidSortOrDirection(f"No property '{sort_by}' found for type 'Product'", parameter="sortBy")
    return key


def validate_page_request(
    page_number: Union[str, int, None],
    page_size: Union[str, int, None],
    sort_dir: Optional[str],
    sort_by: Optional[str],
    max_page_size: int = 100,
    allowed_sort_keys: AbstractSet[str] = PRODUCT_SORT_KEYS,
) -> PageRequest:
    """
    Parse and check pagination/sort parameters.

    Raises:
        InvalidPagination: page index not an integer >= 0, or size not in [1, max_page_size]
        InvalidSortOrDirection: unknown sort key or direction other than asc/desc
    """
    number = _parse_int(page_number, "pageNumber")
    if number < 0:
        raise InvalidPagination("Page index must not be less than zero", parameter="pageNumber")

    size = _parse_int(page_size, "pageSize")
    if size < 1:
        raise InvalidPagination("Page size must not be less than one", parameter="pageSize")
    if size > max_page_size:
        raise InvalidPagination(f"Page size must not exceed {max_page_size}", parameter="pageSize")

    direction = SortDirection.parse(sort_dir)
    key = resolve_sort_key(sort_by, allowed_sort_keys)
    return PageRequest(page_number=number, page_size=size, direction=direction, sort_by=key)


def parse_price(value: Union[str, Decimal, int, float, None], parameter: str) -> Optional[Decimal]:
    """Parse an optional non-negative price bound."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidFilterValue(f"{parameter} must be a decimal number, got '{value}'", parameter=parameter)
    if not price.is_finite() or price < 0:
        raise InvalidFilterValue(f"{parameter} must be a non-negative number", parameter=parameter)
    return price


def validate_price_range(min_price: Optional[Decimal], max_price: Optional[Decimal]) -> None:
    if min_price is not None and max_price is not None and min_price > max_price:
        raise InvalidFilterValue(
            f"minPrice {min_price} is greater than maxPrice {max_price}", parameter="minPrice"
        )


def check_allowed_parameters(names: Iterable[str], allowed: AbstractSet[str]) -> None:
    """Reject the first parameter name that is not in the endpoint's allow-list."""
    for name in names:
        if name not in allowed:
            raise InvalidFilterProperty(name)
