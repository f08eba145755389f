"""
Error kinds raised by the catalog query engine.

Caller errors carry the offending request parameter and the HTTP status the
API layer reports. CatalogStoreError is the internal category: the API layer
logs it and answers with an opaque 500.
"""
from typing import Optional


class CatalogQueryError(Exception):
    """Base class for errors caused by the request itself."""

    status_code = 400

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.parameter = parameter


class InvalidPagination(CatalogQueryError):
    """Page index/size is malformed, out of range, or past the last page."""


class InvalidSortOrDirection(CatalogQueryError):
    """Sort key is not sortable on this endpoint, or direction is not asc/desc."""


class InvalidFilterProperty(CatalogQueryError):
    """A request parameter name the endpoint does not accept."""

    def __init__(self, parameter: str, message: Optional[str] = None):
        super().__init__(message or f"Unexpected parameter: {parameter}", parameter)


class InvalidFilterValue(CatalogQueryError):
    """A known filter parameter with a value that cannot be used (e.g. minPrice > maxPrice)."""


class NoMatchingRecords(CatalogQueryError):
    """Price bounds cannot be resolved because nothing matches the other filters."""

    status_code = 404


class ResourceNotFound(CatalogQueryError):
    """A lookup by id found nothing."""

    status_code = 404

    @classmethod
    def for_entity(cls, entity: str, field: str, value) -> "ResourceNotFound":
        return cls(f"Entity {entity} with {field} = {value} not found!", parameter=field)


class CatalogStoreError(RuntimeError):
    """Raised when the backing store fails while serving a read."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause.__class__.__name__}")
        self.operation = operation
        self.cause = cause
