"""Logging configuration for the short link service."""

import logging
import sys
from typing import List, Optional

ROOT_LOGGER = "shortlinks_app"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"
JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)


def build_formatter(json_format: bool = False) -> logging.Formatter:
    """One-line JSON records for log shippers, plain text otherwise"""
    if json_format:
        return logging.Formatter(JSON_FORMAT)
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Attach handlers to the ``shortlinks_app`` logger.
    
    Modules log through ``logging.getLogger(__name__)``, so the service,
    store, worker and request middleware all end up here. Calling it again
    replaces the handlers rather than stacking duplicates.
    
    Args:
        level: Level name (DEBUG, INFO, ...); unknown names fall back to INFO
        log_file: Also append records to this file
        json_format: Emit one JSON object per line
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    
    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()
    
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    
    formatter = build_formatter(json_format)
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    
    return package_logger
