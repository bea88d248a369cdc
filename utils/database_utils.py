"""
==================================================
Database connectivity utilities for PostgreSQL.
==================================================

Provides the connection helpers used to bootstrap a TableAccessor from the
environment configuration, plus availability checks for scripts that start
before the database does.

Key Features:
    - Engine URL building from config
    - Engine creation without pooling (one accessor, one connection)
    - Database availability checking with retries

Example:
    >>> from utils.database_utils import create_sqlalchemy_engine, wait_for_database
    >>>
    >>> wait_for_database(max_retries=5)
    >>> engine = create_sqlalchemy_engine()
"""

import logging
import time

import psycopg2
from psycopg2 import OperationalError
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.pool import NullPool

from core.config import config
from core.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)


def _connection_params(**overrides) -> dict:
    """Configured connection parameters with any non-None overrides applied."""
    params = config.get_connection_params()
    params.update({key: value for key, value in overrides.items() if value is not None})
    return params


def create_sqlalchemy_engine(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    echo: bool = False
) -> Engine:
    """
    Create a SQLAlchemy engine for the configured database.

    Connections are not pooled: each connect() opens a fresh psycopg2
    connection and close() really closes it.

    Args:
        host: Database hostname (defaults to config)
        port: Database port (defaults to config)
        user: Database user (defaults to config)
        password: Database password (defaults to config)
        database: Database name (defaults to config)
        echo: Enable SQLAlchemy statement logging

    Returns:
        Configured SQLAlchemy Engine
    """
    params = _connection_params(
        host=host, port=port, user=user, password=password, database=database
    )
    connection_url = URL.create(
        drivername='postgresql+psycopg2',
        username=params['user'],
        password=params['password'],
        host=params['host'],
        port=params['port'],
        database=params['database']
    )

    return create_engine(connection_url, echo=echo, poolclass=NullPool)


def check_database_available(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    timeout: int = 5
) -> bool:
    """
    Check if PostgreSQL database is available.

    Args:
        host: Database hostname (defaults to config)
        port: Database port (defaults to config)
        user: Database user (defaults to config)
        password: Database password (defaults to config)
        database: Database name (defaults to config)
        timeout: Connection timeout in seconds

    Returns:
        True if database is available, False otherwise
    """
    params = _connection_params(
        host=host, port=port, user=user, password=password, database=database
    )
    try:
        conn = psycopg2.connect(connect_timeout=timeout, **params)
        conn.close()
        return True
    except OperationalError as e:
        logger.debug(f"Database not available: {e}")
        return False


def wait_for_database(
    max_retries: int = 10,
    retry_delay: int = 2,
    timeout: int = 5,
    **connection_params
) -> bool:
    """
    Wait for PostgreSQL database to become available with retries.

    Args:
        max_retries: Maximum number of retry attempts
        retry_delay: Delay between retries in seconds
        timeout: Connection timeout per attempt in seconds
        **connection_params: host/port/user/password/database overrides

    Returns:
        True once the database answers

    Raises:
        DatabaseConnectionError: If database never becomes available
    """
    params = _connection_params(**connection_params)
    target = f"{params['host']}:{params['port']}/{params['database']}"

    logger.info(f"Waiting for PostgreSQL at {target}...")

    for attempt in range(1, max_retries + 1):
        if check_database_available(timeout=timeout, **connection_params):
            logger.info(f"✅ PostgreSQL is available (attempt {attempt}/{max_retries})")
            return True

        if attempt < max_retries:
            logger.warning(
                f"⏳ PostgreSQL not available yet (attempt {attempt}/{max_retries}), "
                f"retrying in {retry_delay}s..."
            )
            time.sleep(retry_delay)

    error_msg = (
        f"PostgreSQL at {target} did not become available "
        f"after {max_retries} attempts"
    )
    logger.error(f"❌ {error_msg}")
    raise DatabaseConnectionError(error_msg)
