"""
Configuration management for the catalog service.

Loads settings from the YAML config file and provides typed access.
DATABASE_URL in the environment (or a .env file) overrides the YAML value.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import yaml

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()


def _project_root() -> Path:
    """Return project root (parent of catalog package)."""
    return Path(__file__).resolve().parent.parent.parent


DEFAULT_CONFIG_PATH = _project_root() / "config" / "default.yaml"

RATING_SORT_STRATEGIES = ("database", "memory")


@dataclass
class CatalogConfig:
    """Configuration for the catalog query engine."""

    # Storage
    database_url: str = "sqlite:///./catalog.db"
    sql_echo: bool = False

    # Pagination
    default_page_size: int = 12
    max_page_size: int = 100

    # Sorting
    default_sort_by: str = "id"
    default_sort_dir: str = "asc"
    rating_sort_strategy: str = "database"   # "database" (GROUP BY + AVG) or "memory"

    def __post_init__(self) -> None:
        if self.rating_sort_strategy not in RATING_SORT_STRATEGIES:
            raise ValueError(
                f"rating_sort_strategy must be one of {RATING_SORT_STRATEGIES}, "
                f"got {self.rating_sort_strategy!r}"
            )
        if self.default_page_size <= 0 or self.max_page_size < self.default_page_size:
            raise ValueError("default_page_size must be positive and not exceed max_page_size")

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "CatalogConfig":
        """Load configuration from YAML file."""
        path = config_path or DEFAULT_CONFIG_PATH
        data = {}
        if path.exists():
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}

        database_config = data.get('database', {})
        pagination_config = data.get('pagination', {})
        sorting_config = data.get('sorting', {})

        return cls(
            database_url=os.getenv("DATABASE_URL") or database_config.get('url', 'sqlite:///./catalog.db'),
            sql_echo=bool(database_config.get('echo', False)),
            default_page_size=pagination_config.get('default_page_size', 12),
            max_page_size=pagination_config.get('max_page_size', 100),
            default_sort_by=sorting_config.get('default_sort_by', 'id'),
            default_sort_dir=sorting_config.get('default_sort_dir', 'asc'),
            rating_sort_strategy=sorting_config.get('rating_sort_strategy', 'database'),
        )


# Global config instance
_config: Optional[CatalogConfig] = None


def get_config() -> CatalogConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = CatalogConfig.from_yaml()
    return _config


def set_config(config: CatalogConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
