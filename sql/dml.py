"""
===========================================
Data Manipulation Language (DML) Utilities.
===========================================

This module provides reusable functions for creating parameterized SQL DML
statements. Each function returns the SQL text together with the dictionary
of bound parameters to execute it with; identifiers are validated and written
into the text, values are always bound.

Functions:
- insert_statement: Single-row INSERT
- bulk_insert: Multi-row INSERT with one parameter per value
- update_statement: UPDATE with equality conditions
- delete_statement: DELETE with equality conditions
- truncate_statement: TRUNCATE TABLE
- copy_rows_statement: INSERT INTO ... SELECT * FROM ...

Parameter names are generated from column positions rather than column
names, so SET and WHERE values never share a name and multi-row inserts get
one distinct parameter per cell.

Usage:
    from sql.dml import bulk_insert, update_statement

    sql, params = bulk_insert(
        table='book',
        rows=[{'title': 'Dune', 'year': 1965}, {'title': 'Emma', 'year': 1815}]
    )

    sql, params = update_statement(
        table='book',
        data={'title': 'Dune Messiah'},
        conditions={'id': 1}
    )
"""

from typing import Any, Dict, List, Tuple

from sql.identifiers import validate_column, validate_identifier


def insert_statement(table: str, row: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Generate a single-row INSERT statement.

    Args:
        table: Table name
        row: Mapping of column name to value

    Returns:
        Tuple of (SQL INSERT statement, bound parameters)

    Raises:
        ValueError: If the row is empty
    """
    if not row:
        raise ValueError(f"Cannot insert an empty row into {table}")

    return bulk_insert(table, [row])


def bulk_insert(table: str, rows: List[Dict[str, Any]]) -> Tuple[str, Dict[str, Any]]:
    """
    Generate one INSERT statement carrying every row.

    The column set is taken from the first row. Every other row must have
    exactly the same columns; the value of column i in row j is bound as
    ``c{i}_r{j}``.

    Args:
        table: Table name
        rows: Rows to insert, all with the same columns

    Returns:
        Tuple of (SQL INSERT statement, bound parameters)

    Raises:
        ValueError: If there are no rows, the first row is empty, or a row
            has a different column set than the first one
    """
    validate_identifier(table)
    if not rows:
        raise ValueError(f"No rows to insert into {table}")

    columns = list(rows[0].keys())
    if not columns:
        raise ValueError(f"Cannot insert an empty row into {table}")
    for col in columns:
        validate_column(col)

    expected = set(columns)
    params = {}
    value_groups = []
    for row_index, row in enumerate(rows):
        if set(row.keys()) != expected:
            raise ValueError(
                f"Row {row_index} columns {sorted(row.keys())} do not match "
                f"first row columns {sorted(expected)}"
            )
        placeholders = []
        for col_index, col in enumerate(columns):
            name = f"c{col_index}_r{row_index}"
            params[name] = row[col]
            placeholders.append(f":{name}")
        value_groups.append(f"({', '.join(placeholders)})")

    sql = (
        f"INSERT INTO {table} ({', '.join(columns)})\n"
        f"VALUES {', '.join(value_groups)}"
    )
    return sql, params


def _where_clause(conditions: Dict[str, Any], params: Dict[str, Any]) -> str:
    """Render ANDed equality conditions, adding ``where_i`` values to params."""
    clauses = []
    for index, (col, value) in enumerate(conditions.items()):
        name = f"where_{index}"
        clauses.append(f"{validate_column(col)} = :{name}")
        params[name] = value
    return " AND ".join(clauses)


def update_statement(
    table: str,
    data: Dict[str, Any],
    conditions: Dict[str, Any]
) -> Tuple[str, Dict[str, Any]]:
    """
    Generate an UPDATE statement.

    Args:
        table: Table name
        data: Mapping of column to new value
        conditions: Mapping of column to required value, ANDed

    Returns:
        Tuple of (SQL UPDATE statement, bound parameters)

    Raises:
        ValueError: If data or conditions is empty
    """
    validate_identifier(table)
    if not data:
        raise ValueError(f"Nothing to update in {table}")
    if not conditions:
        raise ValueError(f"Refusing to update {table} without conditions")

    params = {}
    set_clauses = []
    for index, (col, value) in enumerate(data.items()):
        name = f"set_{index}"
        set_clauses.append(f"{validate_column(col)} = :{name}")
        params[name] = value

    where = _where_clause(conditions, params)

    sql = f"UPDATE {table}\nSET {', '.join(set_clauses)}\nWHERE {where}"
    return sql, params


def delete_statement(table: str, conditions: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Generate a DELETE statement.

    Raises:
        ValueError: If conditions is empty
    """
    validate_identifier(table)
    if not conditions:
        raise ValueError(f"Refusing to delete from {table} without conditions")

    params = {}
    where = _where_clause(conditions, params)
    return f"DELETE FROM {table}\nWHERE {where}", params


def truncate_statement(table: str) -> str:
    """Generate a TRUNCATE TABLE statement."""
    return f"TRUNCATE TABLE {validate_identifier(table)}"


def copy_rows_statement(source_table: str, target_table: str) -> str:
    """
    Generate an INSERT ... SELECT copying every row of one table into another.

    Both tables must have the same column layout.
    """
    validate_identifier(source_table)
    validate_identifier(target_table)
    return f"INSERT INTO {target_table}\nSELECT * FROM {source_table}"
