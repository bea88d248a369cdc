"""
Exceptions raised by the table accessor.

Database failures surface as one of the subclasses below instead of raw
SQLAlchemy exceptions; translate_error performs the mapping.
"""

from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
    SQLAlchemyError,
)


class TableAccessorError(Exception):
    """Base exception for table accessor operations."""
    pass


class ValidationError(TableAccessorError, ValueError):
    """Raised before any SQL runs when call arguments are malformed."""
    pass


class DatabaseConnectionError(TableAccessorError):
    """Raised when the database cannot be reached or the connection broke."""
    pass


class QuerySyntaxError(TableAccessorError):
    """Raised when the database rejects a statement (bad SQL, unknown table or column)."""
    pass


class ConstraintViolationError(TableAccessorError):
    """Raised when a write breaks a key, uniqueness or not-null constraint."""
    pass


def translate_error(error: SQLAlchemyError, action: str) -> TableAccessorError:
    """
    Map a SQLAlchemy exception onto the accessor's exception hierarchy.

    Args:
        error: Exception raised by SQLAlchemy
        action: Short description of what was attempted, used in the message

    Returns:
        Exception instance to raise (the caller chains it with ``from``)
    """
    detail = getattr(error, 'orig', None) or error
    message = f"Failed to {action}: {detail}"

    if isinstance(error, IntegrityError):
        return ConstraintViolationError(message)
    if isinstance(error, ProgrammingError):
        return QuerySyntaxError(message)
    if isinstance(error, (OperationalError, InterfaceError, DisconnectionError)):
        return DatabaseConnectionError(message)
    return TableAccessorError(message)
