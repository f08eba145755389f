"""
Filter predicates over the product catalog.

Every builder takes an optional criterion and returns either a SQLAlchemy
boolean clause or None. None means "criterion absent": compose() drops it,
so an unfiltered request never carries an empty IN () or a LIKE '%%'.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import and_, func, true
from sqlalchemy.sql.elements import ColumnElement

from catalog.data.models import Category, Product

# Matches every row; the result of composing zero active predicates
NEUTRAL = true()


def normalize_tokens(values: Optional[Iterable[str]]) -> List[str]:
    """
    Split, trim and lower-case raw list-valued query tokens.

    ["Apple, samsung ", " ", "APPLE"] -> ["apple", "samsung"]
    """
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    tokens: List[str] = []
    for value in values:
        if value is None:
            continue
        for part in str(value).split(","):
            part = part.strip().lower()
            if part and part not in tokens:
                tokens.append(part)
    return tokens


def _membership(column, values: Optional[Iterable[str]]) -> Optional[ColumnElement]:
    tokens = normalize_tokens(values)
    if not tokens:
        return None
    return func.lower(func.trim(column)).in_(tokens)


def has_name(name: Optional[str]) -> Optional[ColumnElement]:
    """Case-insensitive substring match on the product name."""
    if name is None or not name.strip():
        return None
    return func.lower(Product.name).contains(name.strip().lower(), autoescape=True)


def has_brands(brands: Optional[Iterable[str]]) -> Optional[ColumnElement]:
    return _membership(Product.brand, brands)


def has_colors(colors: Optional[Iterable[str]]) -> Optional[ColumnElement]:
    return _membership(Product.color, colors)


def has_memories(memories: Optional[Iterable[str]]) -> Optional[ColumnElement]:
    return _membership(Product.memory, memories)


def has_screen_sizes(screen_sizes: Optional[Iterable[str]]) -> Optional[ColumnElement]:
    return _membership(Product.screen_size, screen_sizes)


def has_battery_capacities(battery_capacities: Optional[Iterable[str]]) -> Optional[ColumnElement]:
    return _membership(Product.battery_capacity, battery_capacities)


def has_operating_systems(operating_systems: Optional[Iterable[str]]) -> Optional[ColumnElement]:
    return _membership(Product.operating_system, operating_systems)


def by_categories(category_names: Optional[Iterable[str]]) -> Optional[ColumnElement]:
    """
    Match products whose category name is one of category_names.

    Rendered as EXISTS over the product->category relationship rather than a
    join, so it composes with MIN/MAX and GROUP BY queries unchanged.
    """
    tokens = normalize_tokens(category_names)
    if not tokens:
        return None
    return Product.category.has(func.lower(func.trim(Category.name)).in_(tokens))


def has_price_between(min_price: Decimal, max_price: Decimal) -> ColumnElement:
    """Inclusive price range; bounds come from the price resolver, never raw input."""
    return Product.price.between(min_price, max_price)


def compose(*predicates: Optional[ColumnElement]) -> ColumnElement:
    """AND together the active predicates; no active predicate yields NEUTRAL."""
    active = [p for p in predicates if p is not None]
    if not active:
        return NEUTRAL
    if len(active) == 1:
        return active[0]
    return and_(*active)


@dataclass
class FilterCriteria:
    """Per-request filter values. Built from query parameters and discarded after use."""

    name: Optional[str] = None
    brands: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    memories: List[str] = field(default_factory=list)
    screen_sizes: List[str] = field(default_factory=list)
    battery_capacities: List[str] = field(default_factory=list)
    operating_systems: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    def predicates(self) -> List[Optional[ColumnElement]]:
        """Non-price predicates, None for each absent criterion."""
        return [
            has_name(self.name),
            has_brands(self.brands),
            has_colors(self.colors),
            has_memories(self.memories),
            has_screen_sizes(self.screen_sizes),
            has_battery_capacities(self.battery_capacities),
            has_operating_systems(self.operating_systems),
            by_categories(self.categories),
        ]

    def base_predicate(self) -> ColumnElement:
        """Everything except price, composed."""
        return compose(*self.predicates())

    def as_params(self) -> dict:
        """Request-parameter view, used for logging."""
        return {
            "name": self.name,
            "brand": self.brands,
            "color": self.colors,
            "memory": self.memories,
            "screenSize": self.screen_sizes,
            "batteryCapacity": self.battery_capacities,
            "operatingSystem": self.operating_systems,
            "category": self.categories,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
        }
