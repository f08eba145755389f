"""
Average rating, derived from a product's ratings on every read.

Unrated products report 0.0. Nothing here caches the value on the entity.
"""
from numbers import Number
from typing import Iterable, Union

from sqlalchemy import Float, cast, func
from sqlalchemy.sql.elements import ColumnElement

from catalog.data.models import Rating

UNRATED = 0.0


def average_rating(ratings: Iterable[Union[Rating, Number]]) -> float:
    """Arithmetic mean of the rating values, or UNRATED for an empty collection."""
    total = 0
    count = 0
    for rating in ratings or ():
        total += rating if isinstance(rating, Number) else rating.value
        count += 1
    if count == 0:
        return UNRATED
    return total / count


def average_rating_expression() -> ColumnElement:
    """SQL twin of average_rating() for use with an outer join on ratings."""
    return func.coalesce(func.avg(cast(Rating.value, Float)), UNRATED)
