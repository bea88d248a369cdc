"""
===================================================
Core infrastructure package for the table accessor.
===================================================

This package provides centralized configuration management and logging
infrastructure used throughout the project.

Modules:
    config: Configuration management from environment variables
    logger: Centralized logging configuration and utilities
    errors: Exception hierarchy and SQLAlchemy error translation

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Connecting to {config.db_host}")
"""

__version__ = "0.1.0"
__all__ = ['get_logger', 'setup_logging', 'format_sql', 'config', 'Config']

from core.config import Config, config
from core.logger import format_sql, get_logger, setup_logging
