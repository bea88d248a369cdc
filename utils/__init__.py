"""
==========================
Utility Functions Package.
==========================

Database connectivity helpers used to bootstrap the table accessor.

Modules:
    database_utils: PostgreSQL engine creation and availability checks
"""

__version__ = "1.0.0"
__all__ = [
    'wait_for_database',
    'check_database_available',
    'create_sqlalchemy_engine'
]

from .database_utils import (
    check_database_available,
    create_sqlalchemy_engine,
    wait_for_database,
)
