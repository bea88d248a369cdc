"""
====================================================
SQL utilities package for the table accessor.
====================================================

This package provides the SQL construction functions used by
accessor.table_accessor, organized by SQL operation type. All functions are
pure: they validate identifiers, render SQL text and collect bound values,
and never touch a connection.

The package follows a clear organization:
    - ddl.py: Data Definition Language (CREATE/DROP tables, backups)
    - dml.py: Data Manipulation Language (INSERT/UPDATE/DELETE/TRUNCATE)
    - query_builder.py: SELECT builders and metadata queries (_builder suffix)
    - identifiers.py: Identifier validation and column type reduction

Example:
    >>> from sql.dml import insert_statement
    >>> from sql.query_builder import select_builder
    >>>
    >>> sql, params = insert_statement('book', {'title': 'Dune'})
    >>> query = select_builder('book', columns=['id', 'title'], limit=1)
"""

__version__ = "1.0.0"
__all__ = [
    # DDL functions
    'create_table', 'create_table_like', 'drop_table', 'backup_table_name',
    # DML functions
    'insert_statement', 'bulk_insert', 'update_statement', 'delete_statement',
    'truncate_statement', 'copy_rows_statement',
    # Query builders
    'select_builder', 'join_builder', 'select_within_ids_builder',
    'pivot_select_builder', 'select_by_builder', 'get_column_info_sql',
    # Identifiers
    'validate_identifier', 'validate_name', 'validate_column', 'reduce_column_type'
]

from .ddl import backup_table_name, create_table, create_table_like, drop_table
from .dml import (
    bulk_insert,
    copy_rows_statement,
    delete_statement,
    insert_statement,
    truncate_statement,
    update_statement,
)
from .identifiers import (
    reduce_column_type,
    validate_column,
    validate_identifier,
    validate_name,
)
from .query_builder import (
    get_column_info_sql,
    join_builder,
    pivot_select_builder,
    select_builder,
    select_by_builder,
    select_within_ids_builder,
)
