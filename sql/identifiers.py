"""
===============================================
Identifier validation and column type reduction.
===============================================

Table and column names are written into SQL text as-is (they cannot be bound
parameters), so every builder runs them through ``validate_identifier`` first.
Only plain names are accepted: letters, digits and underscores, optionally
qualified once with a dot (``schema.table`` or ``table.column``). Column lists
may also use ``*`` or ``table.*``.

The module also owns the rule that collapses database type names into the
reduced set used by column introspection.

Example:
    >>> from sql.identifiers import validate_identifier, reduce_column_type
    >>>
    >>> validate_identifier('book.title')
    'book.title'
    >>> reduce_column_type('decimal(10,2)')
    'float'
"""

import re
from typing import Iterable, List

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"

NAME_PATTERN = re.compile(rf"^{_NAME}$")
IDENTIFIER_PATTERN = re.compile(rf"^{_NAME}(\.{_NAME})?$")
COLUMN_PATTERN = re.compile(rf"^(\*|{_NAME}(\.({_NAME}|\*))?)$")

TINYINT_TYPES = {'tinyint'}
INTEGER_TYPES = {'smallint', 'mediumint', 'int', 'integer', 'bigint'}
FLOAT_TYPES = {'float', 'double', 'double precision', 'real', 'decimal', 'numeric'}


def validate_identifier(name: str) -> str:
    """
    Check that a table name is safe to interpolate into SQL text.

    Args:
        name: Table name, optionally schema-qualified

    Returns:
        The name unchanged

    Raises:
        ValueError: If the name is empty or contains anything but
            letters, digits, underscores and a single qualifying dot
    """
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


def validate_name(name: str) -> str:
    """Like validate_identifier, but rejects qualified names (a single bare column)."""
    if not isinstance(name, str) or not NAME_PATTERN.match(name):
        raise ValueError(f"Invalid SQL column name: {name!r}")
    return name


def validate_column(name: str) -> str:
    """Like validate_identifier, but also accepts ``*`` and ``table.*``."""
    if not isinstance(name, str) or not COLUMN_PATTERN.match(name):
        raise ValueError(f"Invalid SQL column name: {name!r}")
    return name


def column_list(columns: Iterable[str] = None) -> str:
    """
    Render a validated, comma separated column list.

    An empty or missing list selects every column.
    """
    columns = list(columns or [])
    if not columns:
        return "*"
    return ", ".join(validate_column(col) for col in columns)


def split_qualified(name: str) -> List[str]:
    """Split ``schema.table`` into ``[schema, table]``; bare names give ``[None, name]``."""
    validate_identifier(name)
    if '.' in name:
        return name.split('.', 1)
    return [None, name]


def reduce_column_type(raw_type: str) -> str:
    """
    Collapse a database type name into tinyint, integer, float or string.

    Size and precision suffixes and the ``unsigned`` modifier are ignored,
    so ``INT(11) UNSIGNED`` reduces like ``int``.

    Args:
        raw_type: Type name as reported by the database

    Returns:
        One of 'tinyint', 'integer', 'float', 'string'
    """
    base = re.sub(r"\(.*?\)", "", (raw_type or "").lower())
    base = " ".join(word for word in base.split() if word != 'unsigned')

    if base in TINYINT_TYPES:
        return 'tinyint'
    if base in INTEGER_TYPES:
        return 'integer'
    if base in FLOAT_TYPES:
        return 'float'
    return 'string'
