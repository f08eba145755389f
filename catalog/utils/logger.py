"""
Logging for the catalog query engine.

Records go to stdout under the "catalog" logger, which does not propagate, so
uvicorn's access log stays separate from query logs. Each module asks for a
child logger by dotted suffix ("query.planner", "services.product_search").
Search and filter-option requests log at INFO with their parameters; the
planner logs the compiled page query at DEBUG; unhandled API errors log at
ERROR with the traceback. LOG_LEVEL in the environment sets the level.
"""
import logging
import os
import sys
from typing import Any, Mapping

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("catalog")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(console_handler)

# Keep catalog records out of the root logger (uvicorn installs its own handlers)
logger.propagate = False


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional dotted suffix, e.g. "query.planner" -> "catalog.query.planner"

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"catalog.{name}")
    return logger


def describe_params(params: Mapping[str, Any]) -> str:
    """Render request parameters as a stable one-line string for log records.

    Empty values are skipped so a search with two filters logs two entries.
    """
    parts = []
    for key in sorted(params):
        value = params[key]
        if value is None or value == [] or value == "":
            continue
        if isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        parts.append(f"{key}={value}")
    return " ".join(parts) if parts else "<none>"
