"""
FastAPI server for the catalog query engine.

Usage:
    uvicorn catalog.api.server:app --reload --port 8000
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AbstractSet, List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from catalog.core.config import get_config
from catalog.data.database import Base, engine, get_db
from catalog.query.errors import CatalogQueryError
from catalog.query.predicates import FilterCriteria
from catalog.query.validation import (
    FILTER_OPTIONS_PARAMETERS,
    PRODUCT_SEARCH_PARAMETERS,
    check_allowed_parameters,
    parse_price,
    validate_page_request,
)
from catalog.schemas import (
    ErrorResponse,
    FilterOptions,
    HealthResponse,
    InternalErrorResponse,
    ProductPage,
    ProductResponse,
)
from catalog.services import FilterOptionsService, ProductSearchService
from catalog.utils.logger import describe_params, get_logger

logger = get_logger("api.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup when they are missing (migrations own production schemas)."""
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.warning("Could not run Base.metadata.create_all: %s. Tables should already exist.", e)
    yield


app = FastAPI(
    title="Catalog API",
    description="Filtered, sorted and paginated product catalog queries",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

def _endpoint_name(request: Request) -> str:
    endpoint = request.scope.get("endpoint")
    return getattr(endpoint, "__name__", "unknown")


@app.exception_handler(CatalogQueryError)
async def catalog_query_error_handler(request: Request, exc: CatalogQueryError):
    """Caller errors: report what was wrong and with which parameter."""
    logger.info(
        "Rejected %s %s: %s (parameter=%s)",
        request.method, request.url.path, exc.message, exc.parameter,
    )
    body = ErrorResponse(
        endpoint=_endpoint_name(request),
        method=request.method,
        path=request.url.path,
        message=exc.message,
        parameter=exc.parameter,
        status=exc.status_code,
        timestamp=datetime.now().isoformat(),
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled exceptions with request context; answer with an opaque 500."""
    logger.error(
        "Unhandled %s in %s %s [%s] params: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        _endpoint_name(request),
        describe_params(dict(request.query_params)),
        exc_info=exc,
    )
    body = InternalErrorResponse(
        endpoint=_endpoint_name(request),
        method=request.method,
        path=request.url.path,
        timestamp=datetime.now().isoformat(),
        exception=type(exc).__name__,
    )
    return JSONResponse(status_code=500, content=body.model_dump())


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------

def allowed_parameters(allowed: AbstractSet[str]):
    """Dependency factory: reject query parameters outside the endpoint's allow-list."""
    def dependency(request: Request) -> None:
        check_allowed_parameters(request.query_params.keys(), allowed)
    return dependency


def build_criteria(
    name: Optional[str],
    brand: Optional[List[str]],
    min_price: Optional[str],
    max_price: Optional[str],
    color: Optional[List[str]],
    memory: Optional[List[str]],
    screen_size: Optional[List[str]],
    battery_capacity: Optional[List[str]],
    operating_system: Optional[List[str]],
    category: Optional[List[str]],
) -> FilterCriteria:
    return FilterCriteria(
        name=name,
        brands=brand or [],
        colors=color or [],
        memories=memory or [],
        screen_sizes=screen_size or [],
        battery_capacities=battery_capacity or [],
        operating_systems=operating_system or [],
        categories=category or [],
        min_price=parse_price(min_price, "minPrice"),
        max_price=parse_price(max_price, "maxPrice"),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/")
def root():
    """Basic liveness check."""
    return {
        "service": "Catalog API",
        "version": app.version,
        "status": "operational",
    }


@app.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """Service health including database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        return HealthResponse(service="healthy", database="healthy")
    except Exception as e:
        logger.warning("Health check database probe failed: %s", e)
        return HealthResponse(service="degraded", database=f"unhealthy: {type(e).__name__}")


@app.get(
    "/api/v1/products",
    response_model=ProductPage,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": InternalErrorResponse}},
    dependencies=[Depends(allowed_parameters(PRODUCT_SEARCH_PARAMETERS))],
)
def find_products(
    name: Optional[str] = Query(None),
    brand: Optional[List[str]] = Query(None),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    color: Optional[List[str]] = Query(None),
    memory: Optional[List[str]] = Query(None),
    screen_size: Optional[List[str]] = Query(None, alias="screenSize"),
    battery_capacity: Optional[List[str]] = Query(None, alias="batteryCapacity"),
    operating_system: Optional[List[str]] = Query(None, alias="operatingSystem"),
    category: Optional[List[str]] = Query(None),
    page_number: Optional[str] = Query(None, alias="pageNumber"),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    sort_dir: Optional[str] = Query(None, alias="sortDir"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    db: Session = Depends(get_db),
):
    """
    Search products with optional filters, pagination and sorting.

    List filters accept repeated parameters or comma-separated values.
    sortBy is one of id, name, brand, price, createdAt, updatedAt, rating.
    """
    config = get_config()
    page = validate_page_request(
        page_number if page_number is not None else 0,
        page_size if page_size is not None else config.default_page_size,
        sort_dir if sort_dir is not None else config.default_sort_dir,
        sort_by if sort_by is not None else config.default_sort_by,
        max_page_size=config.max_page_size,
    )
    criteria = build_criteria(
        name, brand, min_price, max_price, color, memory,
        screen_size, battery_capacity, operating_system, category,
    )
    return ProductSearchService(db, config).find_products(criteria, page)


@app.get(
    "/api/v1/products/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": InternalErrorResponse}},
)
def get_product(product_id: int, db: Session = Depends(get_db)):
    """Get a single product by id, with its computed average rating."""
    return ProductSearchService(db).get_product(product_id)


@app.get(
    "/api/v1/filter/products",
    response_model=FilterOptions,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": InternalErrorResponse}},
    dependencies=[Depends(allowed_parameters(FILTER_OPTIONS_PARAMETERS))],
)
def get_filter_options(
    name: Optional[str] = Query(None),
    brand: Optional[List[str]] = Query(None),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    color: Optional[List[str]] = Query(None),
    memory: Optional[List[str]] = Query(None),
    screen_size: Optional[List[str]] = Query(None, alias="screenSize"),
    battery_capacity: Optional[List[str]] = Query(None, alias="batteryCapacity"),
    operating_system: Optional[List[str]] = Query(None, alias="operatingSystem"),
    category: Optional[List[str]] = Query(None),
    db: Session = Depends(get_db),
):
    """Distinct attribute values and the price range available under the given filters."""
    criteria = build_criteria(
        name, brand, min_price, max_price, color, memory,
        screen_size, battery_capacity, operating_system, category,
    )
    return FilterOptionsService(db).get_filter_options(criteria)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
