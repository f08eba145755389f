"""
Price bound resolution.

The reported price range always describes the filtered universe: requested
bounds are clamped into the [min, max] price actually present among the
products matching every other filter. The result predicate only tightens the
requested bounds, so a range outside the observed prices matches nothing.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from catalog.data.models import Product
from catalog.query.errors import CatalogStoreError, NoMatchingRecords
from catalog.query.predicates import has_price_between
from catalog.utils.logger import get_logger

logger = get_logger("query.price_bounds")


@dataclass(frozen=True)
class PriceBounds:
    """
    Observed, reported and filtering price bounds for one request.

    effective_min/effective_max are the reported range and always lie inside
    [actual_min, actual_max]. filter_min/filter_max restrict the results: a
    requested bound outside the observed range is tightened to it but never
    moved past the other bound, so minPrice above every price matches nothing.
    """
    actual_min: Decimal
    actual_max: Decimal
    effective_min: Decimal
    effective_max: Decimal
    filter_min: Decimal
    filter_max: Decimal

    def predicate(self) -> ColumnElement:
        return has_price_between(self.filter_min, self.filter_max)


def observed_price_range(db: Session, predicate: ColumnElement):
    """MIN/MAX price among products matching predicate; (None, None) when nothing matches."""
    try:
        return db.query(func.min(Product.price), func.max(Product.price)).filter(predicate).one()
    except SQLAlchemyError as exc:
        raise CatalogStoreError("price bound aggregation", exc) from exc


def clamp_price_range(
    actual_min: Decimal,
    actual_max: Decimal,
    requested_min: Optional[Decimal] = None,
    requested_max: Optional[Decimal] = None,
):
    """
    Clamp requested bounds into [actual_min, actual_max].

    An absent bound takes the observed value. The result satisfies
    actual_min <= effective_min <= effective_max <= actual_max as long as
    requested_min <= requested_max (the validator guarantees that).
    """
    effective_min = actual_min if requested_min is None else min(max(requested_min, actual_min), actual_max)
    effective_max = actual_max if requested_max is None else max(min(requested_max, actual_max), actual_min)
    return effective_min, effective_max


def tighten_price_range(
    actual_min: Decimal,
    actual_max: Decimal,
    requested_min: Optional[Decimal] = None,
    requested_max: Optional[Decimal] = None,
):
    """
    Bounds for the result predicate: raise a low min and lower a high max.

    Unlike clamp_price_range the bounds are not pulled toward each other, so
    a requested range lying outside [actual_min, actual_max] stays empty.
    """
    filter_min = actual_min if requested_min is None else max(requested_min, actual_min)
    filter_max = actual_max if requested_max is None else min(requested_max, actual_max)
    return filter_min, filter_max


def resolve_price_bounds(
    db: Session,
    base_predicate: ColumnElement,
    requested_min: Optional[Decimal] = None,
    requested_max: Optional[Decimal] = None,
) -> PriceBounds:
    """
    Resolve effective price bounds for a request.

    Args:
        db: Open session
        base_predicate: Composed predicate of every filter except price
        requested_min: minPrice from the request, if any
        requested_max: maxPrice from the request, if any

    Raises:
        NoMatchingRecords: nothing matches base_predicate, so there is no range to clamp into
    """
    actual_min, actual_max = observed_price_range(db, base_predicate)
    if actual_min is None or actual_max is None:
        raise NoMatchingRecords("No products match the given filters", parameter="price")

    actual_min, actual_max = Decimal(actual_min), Decimal(actual_max)
    effective_min, effective_max = clamp_price_range(actual_min, actual_max, requested_min, requested_max)
    filter_min, filter_max = tighten_price_range(actual_min, actual_max, requested_min, requested_max)
    logger.debug(
        "Price bounds: observed [%s, %s], requested [%s, %s], effective [%s, %s], filter [%s, %s]",
        actual_min, actual_max, requested_min, requested_max,
        effective_min, effective_max, filter_min, filter_max,
    )
    return PriceBounds(actual_min, actual_max, effective_min, effective_max, filter_min, filter_max)
