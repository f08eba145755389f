"""Pytest configuration for catalog tests.

Each test gets a fresh in-memory SQLite database. StaticPool keeps the single
connection alive so the schema survives across sessions in one test.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.api.server import app
from catalog.core.config import CatalogConfig, set_config
from catalog.data.database import Base, get_db, register_sqlite_functions
from catalog.data.models import Category, Product, Rating

engine = register_sqlite_functions(create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# name, brand, price, category, memory, screen_size, battery_capacity, operating_system, color, ratings
CATALOG_ROWS = [
    ("MacBook Air", "Apple", "1099.00", "Laptop", "8GB", "13.6", "52Wh", "macOS", "Silver", [5, 4]),
    ("ThinkPad X1", "Lenovo", "1649.00", "Laptop", "16GB", "14", "57Wh", "Windows", "Black", [3]),
    ("Galaxy S24", "Samsung", "799.99", "Cellular", "128GB", "6.2", "4000mAh", "Android", "Black", [5]),
    ("iPhone 15", "Apple", "899.00", "Cellular", "128GB", "6.1", "3349mAh", "iOS", "Blue", []),
    ("Bravia XR", "Sony", "1299.00", "TV", None, "55", None, "Google TV", "Black", [4, 5, 3]),
    ("WH-1000XM5", "Sony", "399.99", "Headphone", None, None, "30h", None, "Silver", [5, 5]),
    ("Galaxy Buds", "Samsung", "149.99", "Headphone", None, None, "29h", None, " white ", []),
]

# Average ratings: Galaxy S24 5.0, WH-1000XM5 5.0, MacBook Air 4.5, Bravia XR 4.0,
# ThinkPad X1 3.0, iPhone 15 0, Galaxy Buds 0 (ties listed in insertion order)
RATING_DESC = ["Galaxy S24", "WH-1000XM5", "MacBook Air", "Bravia XR", "ThinkPad X1", "iPhone 15", "Galaxy Buds"]
RATING_ASC = ["iPhone 15", "Galaxy Buds", "ThinkPad X1", "Bravia XR", "MacBook Air", "Galaxy S24", "WH-1000XM5"]


def add_product(db, category, name, price, brand="Acme", ratings=(), **attributes):
    """Insert a product with the given rating values (one synthetic user per value)."""
    product = Product(name=name, brand=brand, price=Decimal(str(price)), category=category, **attributes)
    db.add(product)
    for user_id, value in enumerate(ratings, start=1):
        db.add(Rating(product=product, user_id=user_id, value=value))
    db.flush()
    return product


@pytest.fixture(scope="function", autouse=True)
def setup_database():
    """Create fresh tables for each test and drop them afterwards."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def default_config():
    """Pin the configuration so local YAML or env changes don't leak into tests."""
    config = CatalogConfig()
    set_config(config)
    yield config
    set_config(CatalogConfig())


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def categories(db):
    by_name = {}
    for name in ("Laptop", "Cellular", "TV", "Headphone"):
        category = Category(name=name)
        db.add(category)
        by_name[name] = category
    db.flush()
    return by_name


@pytest.fixture
def catalog(db, categories):
    """Seven products across four categories; returns product ids by name."""
    ids = {}
    for name, brand, price, category, memory, screen, battery, os_name, color, ratings in CATALOG_ROWS:
        product = add_product(
            db, categories[category], name, price, brand=brand, ratings=ratings,
            memory=memory, screen_size=screen, battery_capacity=battery,
            operating_system=os_name, color=color,
        )
        ids[name] = product.id
    db.commit()
    return ids


@pytest.fixture
def three_price_catalog(db, categories):
    """Three products priced 100, 250 and 900."""
    for name, price in (("Budget", 100), ("Middle", 250), ("Premium", 900)):
        add_product(db, categories["Cellular"], name, price)
    db.commit()


@pytest.fixture
def client(catalog):
    """TestClient bound to the seeded test database."""
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
