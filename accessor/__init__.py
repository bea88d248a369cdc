"""
==========================
Table Accessor Package.
==========================

Generic CRUD access to arbitrary tables over one database connection.

Modules:
    table_accessor: The TableAccessor component

Example:
    >>> from accessor import TableAccessor
    >>>
    >>> with TableAccessor() as db:
    ...     rows = db.select_within_ids('book', ['id', 'title'], [1, 2, 3])
"""

__version__ = "1.0.0"
__all__ = [
    'TableAccessor',
    'TableAccessorError',
    'ValidationError',
    'DatabaseConnectionError',
    'QuerySyntaxError',
    'ConstraintViolationError'
]

from core.errors import (
    ConstraintViolationError,
    DatabaseConnectionError,
    QuerySyntaxError,
    TableAccessorError,
    ValidationError,
)
from .table_accessor import TableAccessor
