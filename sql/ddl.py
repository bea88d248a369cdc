"""
=======================================================================
Data Definition Language (DDL) utilities for table creation and removal.
=======================================================================

Provides the PostgreSQL DDL statements issued by the table accessor.

Key Features:
    - Table creation with a leading auto-incrementing ``id`` primary key
    - Structure-only table copies for backups
    - Idempotent creation and dropping (IF NOT EXISTS / IF EXISTS)

Functions:
    create_table: Generate CREATE TABLE with the ``id`` key column
    create_table_like: Generate CREATE TABLE ... (LIKE ...) for backups
    drop_table: Generate DROP TABLE statement
    backup_table_name: Name of the backup table derived from a base name

Example:
    >>> from sql.ddl import create_table
    >>>
    >>> print(create_table('book', {'title': 'VARCHAR(255) NOT NULL', 'year': 'INTEGER'}))
    CREATE TABLE IF NOT EXISTS book (
        id SERIAL PRIMARY KEY,
        title VARCHAR(255) NOT NULL,
        year INTEGER
    )
"""

from typing import Dict

from sql.identifiers import validate_identifier

ID_COLUMN_DEFINITION = "id SERIAL PRIMARY KEY"
BACKUP_SUFFIX = "_backup"


def create_table(
    table: str,
    columns: Dict[str, str],
    if_not_exists: bool = True
) -> str:
    """Generate CREATE TABLE statement.

    The table always starts with ``id SERIAL PRIMARY KEY``; the caller's
    columns follow in the given order. Column definitions are raw SQL type
    expressions (``VARCHAR(50) NOT NULL``) and are written as given.

    Args:
        table: Table name
        columns: Mapping of column name to column definition
        if_not_exists: If True, add IF NOT EXISTS clause

    Returns:
        SQL CREATE TABLE statement

    Raises:
        ValueError: If a column is named ``id`` or has an empty definition
    """
    validate_identifier(table)

    column_defs = [f"    {ID_COLUMN_DEFINITION}"]
    for name, definition in columns.items():
        validate_identifier(name)
        if name.lower() == 'id':
            raise ValueError(f"Column 'id' is created automatically for {table}")
        if not definition or not str(definition).strip():
            raise ValueError(f"Column {name} of {table} has no definition")
        column_defs.append(f"    {name} {definition}")

    sql = "CREATE TABLE"
    if if_not_exists:
        sql += " IF NOT EXISTS"

    return f"{sql} {table} (\n" + ",\n".join(column_defs) + "\n)"


def create_table_like(table: str, source_table: str) -> str:
    """
    Generate CREATE TABLE copying the structure (not the rows) of another table.

    Defaults, constraints and indexes of the source are included.
    """
    validate_identifier(table)
    validate_identifier(source_table)
    return f"CREATE TABLE {table} (LIKE {source_table} INCLUDING ALL)"


def drop_table(table: str, if_exists: bool = True, cascade: bool = False) -> str:
    """
    Generate DROP TABLE statement.

    Args:
        table: Table name
        if_exists: Add IF EXISTS clause
        cascade: Add CASCADE option

    Returns:
        SQL DROP TABLE statement
    """
    sql = "DROP TABLE"

    if if_exists:
        sql += " IF EXISTS"

    sql += f" {validate_identifier(table)}"

    if cascade:
        sql += " CASCADE"

    return sql


def backup_table_name(name: str) -> str:
    """Return ``<name>_backup``."""
    return validate_identifier(f"{name}{BACKUP_SUFFIX}")
