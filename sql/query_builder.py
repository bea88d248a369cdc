"""
============================
SQL Query Builder Utilities.
============================

This module provides the building blocks for the SELECT statements issued by
the table accessor. All builders follow the _builder naming convention and
are pure functions: they return SQL text (and, where values are involved, the
bound parameters that go with it) without touching a connection.

Query Builders:
- select_builder: SELECT with optional LEFT JOINs, raw WHERE and LIMIT
- join_builder: Single JOIN clause
- select_within_ids_builder: SELECT filtered by an ``id IN (...)`` list
- pivot_select_builder: SELECT from a target table through a pivot table
- select_by_builder: SELECT filtered by one bound equality

Metadata Query Functions:
- get_column_info_sql: Column names and declared types of a table

Table and column names are validated with sql.identifiers and written into
the SQL text. Only values are bound. WHERE fragments and join conditions are
raw SQL supplied by the caller and are emitted untouched.

Usage:
    from sql.query_builder import select_builder, pivot_select_builder

    query = select_builder(
        table='book',
        columns=['book.id', 'author.name'],
        where="book.year > 2000",
        left_joins={'author': 'author.id = book.author_id'}
    )
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from sql.identifiers import (
    column_list,
    split_qualified,
    validate_column,
    validate_identifier,
    validate_name,
)


def select_builder(
    table: str,
    columns: Optional[List[str]] = None,
    where: Optional[str] = None,
    limit: int = 0,
    left_joins: Optional[Dict[str, str]] = None
) -> str:
    """
    Build a SELECT statement.

    Args:
        table: Table to select from
        columns: Columns to select (empty or None selects ``*``)
        where: Raw boolean SQL fragment, emitted without escaping
        limit: Emit ``LIMIT n`` when greater than zero
        left_joins: Mapping of joined table to raw join condition

    Returns:
        SQL SELECT statement
    """
    sql = f"SELECT {column_list(columns)}\nFROM {validate_identifier(table)}"

    for join_table, condition in (left_joins or {}).items():
        sql += "\n" + join_builder(join_table, condition)

    if where:
        sql += f"\nWHERE {where}"

    if limit and limit > 0:
        sql += f"\nLIMIT {int(limit)}"

    return sql


def join_builder(table: str, condition: str, join_type: str = "LEFT") -> str:
    """
    Build a JOIN clause.

    Args:
        table: Joined table name
        condition: Raw ON condition
        join_type: JOIN type (INNER, LEFT, RIGHT, FULL)

    Returns:
        SQL JOIN clause
    """
    join_type = join_type.upper()
    if join_type not in ('INNER', 'LEFT', 'RIGHT', 'FULL'):
        raise ValueError(f"Unsupported join type: {join_type}")
    if not condition:
        raise ValueError(f"Join on {table} requires a condition")

    return f"{join_type} JOIN {validate_identifier(table)} ON {condition}"


def select_within_ids_builder(
    table: str,
    columns: Optional[List[str]] = None,
    ids: Optional[Iterable[Any]] = None
) -> str:
    """
    Build a SELECT restricted to rows whose ``id`` is in the given set.

    Ids are written literally into the statement, so each one is coerced
    with int() first. An empty id set leaves the statement unfiltered.

    Args:
        table: Table to select from
        columns: Columns to select (empty or None selects ``*``)
        ids: Integer ids to match

    Returns:
        SQL SELECT statement

    Raises:
        ValueError: If an id is not an integer
    """
    sql = f"SELECT {column_list(columns)}\nFROM {validate_identifier(table)}"

    id_values = []
    for value in ids or []:
        if isinstance(value, bool) or isinstance(value, float) and not value.is_integer():
            raise ValueError(f"Id is not an integer: {value!r}")
        try:
            id_values.append(str(int(value)))
        except (TypeError, ValueError):
            raise ValueError(f"Id is not an integer: {value!r}")

    if id_values:
        sql += f"\nWHERE id IN ({', '.join(id_values)})"

    return sql


def pivot_select_builder(
    pivot_table: str,
    target_table: str,
    pivot_column: str,
    pivot_value: Any,
    target_columns: Optional[List[str]] = None
) -> Tuple[str, Dict[str, Any]]:
    """
    Build a SELECT of target rows linked through a pivot table.

    Joins ``target_table.id = pivot_table.pivot_column`` and keeps rows
    whose pivot column equals the bound pivot value.

    Args:
        pivot_table: Linking table
        target_table: Table whose rows are returned
        pivot_column: Pivot table column holding target ids
        pivot_value: Value to match in the pivot column
        target_columns: Columns to select (empty or None selects ``*``)

    Returns:
        Tuple of (SQL SELECT statement, bound parameters)
    """
    validate_identifier(pivot_table)
    validate_identifier(target_table)
    validate_name(pivot_column)

    sql = f"""SELECT {column_list(target_columns)}
FROM {target_table}
JOIN {pivot_table} ON {target_table}.id = {pivot_table}.{pivot_column}
WHERE {pivot_table}.{pivot_column} = :pivot_value"""

    return sql, {'pivot_value': pivot_value}


def select_by_builder(
    table: str,
    column: str,
    value: Any,
    columns: Optional[List[str]] = None,
    limit: int = 1
) -> Tuple[str, Dict[str, Any]]:
    """Build a SELECT matching one column against a bound value."""
    sql = (
        f"SELECT {column_list(columns)}\nFROM {validate_identifier(table)}\n"
        f"WHERE {validate_column(column)} = :value"
    )
    if limit and limit > 0:
        sql += f"\nLIMIT {int(limit)}"
    return sql, {'value': value}


def get_column_info_sql(table: str) -> Tuple[str, Dict[str, Any]]:
    """
    Generate SQL to get the column names and declared types of a table.

    A schema-qualified name (``schema.table``) restricts the lookup to that
    schema; a bare name is looked up in the current schema.

    Names are folded to lower case, as PostgreSQL folds unquoted
    identifiers when the table is created.

    Args:
        table: Table name, optionally schema-qualified

    Returns:
        Tuple of (SQL query, bound parameters); the query yields
        ``column_name`` and ``data_type`` ordered by ordinal position
    """
    schema, table_name = split_qualified(table)
    if schema is not None:
        schema = schema.lower()
    table_name = table_name.lower()

    sql = """SELECT
    column_name,
    data_type
FROM information_schema.columns
WHERE table_name = :table_name
  AND table_schema = COALESCE(:table_schema, current_schema())
ORDER BY ordinal_position"""

    return sql, {'table_name': table_name, 'table_schema': schema}
