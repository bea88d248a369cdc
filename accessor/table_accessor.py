"""
========================================================
Generic table access over a single database connection.
========================================================

TableAccessor turns structured call parameters (table name, columns, rows,
conditions) into SQL, binds the values, executes the statement on the one
connection it holds and hands back plain dictionaries or True.

SQL generation is delegated to the sql/ package; this module only executes,
commits and translates failures.

Key Features:
    - SELECT with raw WHERE fragments, LEFT JOINs and single-row LIMIT mode
    - SELECT by id list and through a pivot table
    - Single and multi-row INSERT, UPDATE and DELETE with bound values
    - CREATE / DROP / TRUNCATE / backup of whole tables
    - Column type introspection reduced to tinyint/integer/float/string
    - Append-only merge of one table into another, deduplicated on a key column

Error Policy:
    Every operation either succeeds or raises. Malformed arguments raise
    ValidationError before SQL is built. Database failures are rolled back
    and raised as DatabaseConnectionError, QuerySyntaxError,
    ConstraintViolationError or TableAccessorError. Reads that match nothing
    return an empty list (or an empty dict in single-row mode).

Security:
    Table and column names are validated (letters, digits, underscore, one
    qualifying dot) but otherwise written into the SQL text. The ``where``
    argument of select() and the join conditions are raw SQL and are NOT
    escaped: never build them from untrusted input.

Concurrency:
    One connection, used synchronously. An accessor must not be shared
    between threads; give each thread its own instance.

Example:
    >>> from accessor.table_accessor import TableAccessor
    >>>
    >>> with TableAccessor() as db:
    ...     db.create_table('book', {'title': 'VARCHAR(255)', 'isbn': 'VARCHAR(20)'})
    ...     db.insert('book', {'title': 'Dune', 'isbn': '9780441013593'})
    ...     first = db.select('book', ['id', 'title'], "title LIKE 'D%'", limit=1)
    ...     db.merge_tables('book_import', 'book', merge_column='isbn')
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.errors import TableAccessorError, ValidationError, translate_error
from core.logger import format_sql
from sql.ddl import backup_table_name, create_table_like
from sql.ddl import create_table as create_table_sql
from sql.ddl import drop_table as drop_table_sql
from sql.dml import (
    bulk_insert,
    copy_rows_statement,
    delete_statement,
    insert_statement,
    truncate_statement,
    update_statement,
)
from sql.identifiers import reduce_column_type, validate_identifier, validate_name
from sql.query_builder import (
    get_column_info_sql,
    pivot_select_builder,
    select_builder,
    select_by_builder,
    select_within_ids_builder,
)
from utils.database_utils import create_sqlalchemy_engine

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class TableAccessor:
    """Build and run SQL against arbitrary tables on one held connection.

    Attributes:
        engine: Engine the connection came from, if one was given or created

    Example:
        >>> accessor = TableAccessor(create_engine("postgresql://..."))
        >>> accessor.update('book', {'title': 'Emma'}, {'id': 1})
        True
        >>> accessor.close()
    """

    def __init__(self, connection: Optional[Union[Engine, Connection]] = None):
        """Open (or adopt) the connection used for every call.

        Args:
            connection: An Engine to connect with, an already open
                Connection to adopt, or None to build an engine from
                core.config (DB_HOST, DB_NAME, DB_USER, DB_PASS)

        Raises:
            DatabaseConnectionError: If the connection cannot be opened
        """
        self._owns_engine = connection is None
        if connection is None:
            connection = create_sqlalchemy_engine()

        self.engine: Optional[Engine] = None
        if isinstance(connection, Engine):
            self.engine = connection
            try:
                self._connection = connection.connect()
            except SQLAlchemyError as e:
                logger.error(f"Could not connect to the database: {e}")
                raise translate_error(e, "connect to the database") from e
        else:
            self._connection = connection

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def get_connection(self) -> Connection:
        """Return the held connection."""
        return self._connection

    def close(self) -> None:
        """Close the held connection, and the engine if this accessor created it."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        if self._owns_engine and self.engine is not None:
            self.engine.dispose()
            self.engine = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Execution helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _validated(self, action: str):
        """Turn ValueError from the SQL builders into ValidationError."""
        try:
            yield
        except ValidationError:
            raise
        except ValueError as e:
            logger.error(f"Invalid arguments to {action}: {e}")
            raise ValidationError(f"Invalid arguments to {action}: {e}") from e

    def _connection_or_raise(self) -> Connection:
        if self._connection is None:
            raise TableAccessorError("TableAccessor is closed")
        return self._connection

    def _run(self, action: str, statements: List[tuple], fetch: Optional[str] = None):
        """
        Execute statements in one transaction and commit.

        Args:
            action: Description used in logs and error messages
            statements: (sql, params) pairs, executed in order
            fetch: 'all' or 'one' to return rows of the last statement

        Returns:
            List of rows for fetch='all', a row or None for fetch='one',
            otherwise None

        Raises:
            TableAccessorError: Translated database failure, after rollback
        """
        conn = self._connection_or_raise()
        rows = None
        try:
            for sql, params in statements:
                logger.debug(f"{action}: {format_sql(sql)} {params or ''}")
                result = conn.execute(text(sql), params or {})
            if fetch == 'all':
                rows = [dict(row) for row in result.mappings().all()]
            elif fetch == 'one':
                row = result.mappings().first()
                rows = dict(row) if row is not None else None
            conn.commit()
        except SQLAlchemyError as e:
            try:
                conn.rollback()
            except SQLAlchemyError as rollback_error:
                logger.error(f"Rollback after failed {action} also failed: {rollback_error}")
            logger.error(f"Failed to {action}: {e}")
            raise translate_error(e, action) from e
        return rows

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        columns: Optional[List[str]] = None,
        where: str = '',
        limit: int = 0,
        left_joins: Optional[Dict[str, str]] = None
    ) -> Union[List[Row], Row]:
        """
        Select rows from a table.

        Args:
            table: Table name
            columns: Columns to return; empty selects every column
            where: Raw SQL condition (not escaped)
            limit: When greater than zero, LIMIT the query and return only
                the first row as a dict ({} if none matched)
            left_joins: Mapping of table to raw join condition, each added
                as ``LEFT JOIN <table> ON <condition>``

        Returns:
            List of rows, or a single row when limit > 0
        """
        with self._validated(f"select from {table}"):
            sql = select_builder(table, columns, where, limit, left_joins)

        if limit and limit > 0:
            row = self._run(f"select from {table}", [(sql, None)], fetch='one')
            return row or {}
        return self._run(f"select from {table}", [(sql, None)], fetch='all')

    def select_within_ids(
        self,
        table: str,
        columns: Optional[List[str]] = None,
        ids: Optional[Iterable[int]] = None
    ) -> List[Row]:
        """
        Select rows whose ``id`` is one of the given ids.

        An empty id list applies no filter and returns every row.
        """
        with self._validated(f"select ids from {table}"):
            sql = select_within_ids_builder(table, columns, ids)
        return self._run(f"select ids from {table}", [(sql, None)], fetch='all')

    def select_through_pivot(
        self,
        pivot_table: str,
        target_table: str,
        pivot_column: str,
        pivot_value: Any,
        target_columns: Optional[List[str]] = None
    ) -> List[Row]:
        """
        Select target rows linked to a value through a pivot table.

        Rows are joined on ``target_table.id = pivot_table.pivot_column`` and
        filtered on ``pivot_table.pivot_column = pivot_value`` (bound).
        """
        action = f"select {target_table} through {pivot_table}"
        with self._validated(action):
            sql, params = pivot_select_builder(
                pivot_table, target_table, pivot_column, pivot_value, target_columns
            )
        return self._run(action, [(sql, params)], fetch='all')

    def select_one_by(
        self,
        table: str,
        column: str,
        value: Any,
        columns: Optional[List[str]] = None
    ) -> Row:
        """Return the first row whose column equals value (bound), or {}."""
        with self._validated(f"select from {table}"):
            sql, params = select_by_builder(table, column, value, columns)
        return self._run(f"select from {table}", [(sql, params)], fetch='one') or {}

    def get_column_names_with_mapped_types(self, table: str) -> Dict[str, str]:
        """
        Map each column of a table to tinyint, integer, float or string.

        Args:
            table: Table name, optionally schema-qualified

        Returns:
            Column name to reduced type, in column order ({} for an
            unknown table)
        """
        with self._validated(f"describe {table}"):
            sql, params = get_column_info_sql(table)
        rows = self._run(f"describe {table}", [(sql, params)], fetch='all')

        if not rows:
            logger.warning(f"No columns found for table {table}")

        return {row['column_name']: reduce_column_type(row['data_type']) for row in rows}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, table: str, row: Row) -> bool:
        """Insert one row; every value is bound."""
        with self._validated(f"insert into {table}"):
            sql, params = insert_statement(table, row)
        self._run(f"insert into {table}", [(sql, params)])
        return True

    def insert_multiple(self, table: str, rows: List[Row]) -> bool:
        """
        Insert many rows with a single INSERT statement.

        All rows must have the same columns as the first one; a mismatch
        raises ValidationError and nothing is inserted.
        """
        with self._validated(f"insert into {table}"):
            sql, params = bulk_insert(table, rows)
        self._run(f"insert {len(rows)} rows into {table}", [(sql, params)])
        return True

    def update(self, table: str, data: Row, conditions: Dict[str, Any]) -> bool:
        """
        Update rows matching every condition (column = value, ANDed).

        A column may appear in both data and conditions.

        Raises:
            ValidationError: If data or conditions is empty
        """
        with self._validated(f"update {table}"):
            sql, params = update_statement(table, data, conditions)
        self._run(f"update {table}", [(sql, params)])
        return True

    def delete(self, table: str, conditions: Dict[str, Any]) -> bool:
        """
        Delete rows matching every condition (column = value, ANDed).

        Raises:
            ValidationError: If conditions is empty
        """
        with self._validated(f"delete from {table}"):
            sql, params = delete_statement(table, conditions)
        self._run(f"delete from {table}", [(sql, params)])
        return True

    def truncate_table(self, table: str) -> bool:
        """Remove every row of a table."""
        with self._validated(f"truncate {table}"):
            sql = truncate_statement(table)
        self._run(f"truncate {table}", [(sql, None)])
        logger.info(f"Truncated table {table}")
        return True

    delete_all = truncate_table

    def drop_table(self, table: str) -> bool:
        """Drop a table; dropping a missing table is not an error."""
        with self._validated(f"drop {table}"):
            sql = drop_table_sql(table)
        self._run(f"drop {table}", [(sql, None)])
        logger.info(f"Dropped table {table}")
        return True

    def create_table(self, table_name: str, column_defs: Dict[str, str]) -> bool:
        """
        Create a table unless it already exists.

        The table gets a leading ``id SERIAL PRIMARY KEY`` column followed by
        column_defs (name to raw SQL definition, e.g. 'VARCHAR(50)').

        Raises:
            ValidationError: If column_defs names an ``id`` column
        """
        with self._validated(f"create {table_name}"):
            sql = create_table_sql(table_name, column_defs)
        self._run(f"create {table_name}", [(sql, None)])
        logger.info(f"Created table {table_name} (if not present)")
        return True

    def backup(self, table_name: str, backup_table_name_base: str) -> bool:
        """
        Copy a table, structure and rows, to ``<backup_table_name_base>_backup``.

        Both steps run in one transaction. The backup table must not exist yet.
        """
        action = f"back up {table_name}"
        with self._validated(action):
            backup_name = backup_table_name(backup_table_name_base)
            statements = [
                (create_table_like(backup_name, table_name), None),
                (copy_rows_statement(table_name, backup_name), None),
            ]
        self._run(action, statements)
        logger.info(f"Backed up {table_name} to {backup_name}")
        return True

    def merge_tables(
        self,
        source_table: str,
        target_table: str,
        merge_column: Optional[str] = None
    ) -> bool:
        """
        Append the rows of source_table to target_table.

        With merge_column, a source row is skipped when its merge_column
        value already occurs in target_table (as read before the merge
        starts). Without it, every source row is inserted. Target rows are
        never updated or deleted, and source rows are inserted whole,
        every column included. All inserts run in one transaction: if any
        of them fails, none of them is kept.

        Args:
            source_table: Table to read rows from
            target_table: Table to insert rows into
            merge_column: Column identifying rows already present

        Returns:
            True once every source row has been inserted or skipped

        Raises:
            ValidationError: If merge_column is not a column of either table
        """
        with self._validated(f"merge {source_table} into {target_table}"):
            validate_identifier(source_table)
            validate_identifier(target_table)
            if merge_column is not None:
                validate_name(merge_column)

        source_rows = self.select(source_table)

        existing_keys = set()
        if merge_column is not None:
            self._check_merge_column(source_table, source_rows, merge_column)
            target_rows = self.select(target_table)
            self._check_merge_column(target_table, target_rows, merge_column)
            existing_keys = {row[merge_column] for row in target_rows}

        action = f"merge {source_table} into {target_table}"
        statements = []
        skipped = 0
        with self._validated(action):
            for row in source_rows:
                if merge_column is not None and row[merge_column] in existing_keys:
                    skipped += 1
                    continue
                statements.append(insert_statement(target_table, row))

        if statements:
            self._run(action, statements)

        logger.info(
            f"Merged {source_table} into {target_table}: "
            f"{len(statements)} inserted, {skipped} skipped"
        )
        return True

    @staticmethod
    def _check_merge_column(table: str, rows: List[Row], merge_column: str) -> None:
        if rows and merge_column not in rows[0]:
            raise ValidationError(f"Merge column {merge_column} is not a column of {table}")
