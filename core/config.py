"""
================================================
Configuration management for the table accessor.
================================================

Loads database settings from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

Environment variables:
    DB_HOST: Database server hostname (default 'localhost')
    DB_PORT: Database server port (default 5432)
    DB_NAME: Database name
    DB_USER: Database username
    DB_PASS: Database password

Settings are read once, when this module is imported.

Example:
    >>> from core.config import config
    >>>
    >>> # Connection settings as keyword arguments
    >>> params = config.get_connection_params()
    >>>
    >>> # Access individual settings
    >>> print(f"Host: {config.db_host}, Port: {config.db_port}")
"""

import os
from dataclasses import asdict, dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        host: PostgreSQL server hostname or IP address
        port: PostgreSQL server port number
        user: Database username
        password: Database password
        database: Database name
    """

    host: str
    port: int
    user: str
    password: str
    database: str


class Config:
    """Centralized configuration manager.

    Attributes:
        db: DatabaseConfig instance with database connection settings

    Properties:
        db_host: Database server hostname
        db_port: Database server port
        db_user: Database username
        db_password: Database password
        db_name: Database name

    Example:
        >>> config = Config()
        >>> params = config.get_connection_params()
        >>> print(f"Connecting to {config.db_host}:{config.db_port}")
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = DatabaseConfig(
            host=os.getenv('DB_HOST', 'localhost'),
            port=int(os.getenv('DB_PORT', '5432')),
            user=os.getenv('DB_USER', 'postgres'),
            password=os.getenv('DB_PASS', ''),
            database=os.getenv('DB_NAME', 'postgres')
        )

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get database server port number."""
        return self.db.port

    @property
    def db_user(self) -> str:
        """Get database username."""
        return self.db.user

    @property
    def db_password(self) -> str:
        """Get database password."""
        return self.db.password

    @property
    def db_name(self) -> str:
        """Get database name."""
        return self.db.database

    def get_connection_params(self) -> dict:
        """Get database connection parameters.

        Returns:
            Dictionary with keys: host, port, user, password, database
        """
        return asdict(self.db)


# Global configuration instance
config = Config()
