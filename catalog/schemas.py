"""
Pydantic v2 response schemas for the catalog API.

Caller errors use ErrorResponse; unexpected failures use InternalErrorResponse,
which names the exception class and nothing else about the failure.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductResponse(BaseModel):
    """A product as returned by search and detail endpoints."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    brand: str
    price: float
    description: Optional[str] = None
    image: Optional[str] = None
    category: str = Field(..., description="Category name (not id)")
    memory: Optional[str] = None
    screen_size: Optional[str] = None
    battery_capacity: Optional[str] = None
    operating_system: Optional[str] = None
    color: Optional[str] = None
    average_rating: float = Field(0.0, description="Mean of the product's ratings; 0 when unrated")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductPage(BaseModel):
    """
    Page envelope for product search.

    total_pages == ceil(total_elements / page_size); is_first/is_last describe
    page_number within total_pages. min_price/max_price are the effective
    price bounds for the filtered set.
    """
    total_elements: int
    page_number: int
    page_size: int
    total_pages: int
    is_first: bool
    is_last: bool
    min_price: float
    max_price: float
    products: List[ProductResponse]


class FilterOptions(BaseModel):
    """Distinct attribute values present among the products matching a filter."""
    brands: List[str]
    prices: List[float] = Field(..., description="[min, max] effective price range")
    colors: List[str]
    memories: List[str]
    screen_sizes: List[str]
    battery_capacities: List[str]
    operating_systems: List[str]
    categories: List[str]


class ErrorResponse(BaseModel):
    endpoint: str = Field(..., description="Handler that rejected the request")
    method: str
    path: str
    message: str
    parameter: Optional[str] = Field(None, description="Request parameter at fault, when known")
    status: int
    timestamp: str


class InternalErrorResponse(BaseModel):
    endpoint: str
    method: str
    path: str
    message: str = "Internal server error"
    status: int = 500
    timestamp: str
    exception: str = Field(..., description="Exception class name")
    internal_server_error: str = "Contact Admin"


class HealthResponse(BaseModel):
    service: str
    database: str
