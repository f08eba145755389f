"""
Database connection and session management.
Uses SQLAlchemy; the URL comes from CatalogConfig (DATABASE_URL overrides it).
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from catalog.core.config import get_config
from catalog.utils.logger import get_logger

logger = get_logger("data.database")

# Base class for all our database models (must be defined before engine)
Base = declarative_base()


def normalize_database_url(url: str) -> str:
    """Hosted Postgres often hands out postgres://, SQLAlchemy expects postgresql://."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(engine: Engine) -> Engine:
    """
    Replace SQLite's ASCII-only lower() with Python's str.lower on every connection.

    Filters fold request tokens with str.lower, so the column side must fold the
    same way. Registered as deterministic so lower(name) can back an index.
    """
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    return engine


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for the given URL with per-dialect connect args."""
    url = normalize_database_url(url)
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False}, echo=echo, pool_pre_ping=True)
        return register_sqlite_functions(engine)
    return create_engine(url, echo=echo, pool_pre_ping=True)


_config = get_config()
engine = build_engine(_config.database_url, echo=_config.sql_echo)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
logger.info("Catalog database engine created for %s", engine.url.render_as_string(hide_password=True))


def get_db():
    """
    Dependency function that provides a database session.
    The session stays open until the response has been assembled.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
