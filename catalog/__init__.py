"""
Catalog - product catalog query engine

Composes optional filter criteria into one query over the product catalog:
- Neutral-when-absent predicates combined with AND
- Price bounds clamped to the filtered set
- Pushdown or aggregate (average rating) sorting with validated pagination
"""

from catalog.core.config import CatalogConfig, get_config, set_config

__all__ = [
    'CatalogConfig',
    'get_config',
    'set_config',
]

__version__ = '0.1.0'
