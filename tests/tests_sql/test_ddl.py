"""
==================================================
Pytest suite for sql/ddl.py
==================================================

How to Execute:
---------------
All tests:          pytest tests/tests_sql/test_ddl.py -v
"""

import pytest

from sql.ddl import backup_table_name, create_table, create_table_like, drop_table


@pytest.mark.unit
def test_create_table_leads_with_id_primary_key():
    """The auto-incrementing id key is always the first column."""
    sql = create_table('t', {'name': 'VARCHAR(50)'})

    assert sql == (
        "CREATE TABLE IF NOT EXISTS t (\n"
        "    id SERIAL PRIMARY KEY,\n"
        "    name VARCHAR(50)\n"
        ")"
    )


@pytest.mark.unit
def test_create_table_keeps_column_order():
    """Caller columns follow the id column in the given order."""
    sql = create_table('book', {'title': 'VARCHAR(255) NOT NULL', 'year': 'INTEGER'})
    lines = sql.splitlines()

    assert lines[1].strip() == "id SERIAL PRIMARY KEY,"
    assert lines[2].strip() == "title VARCHAR(255) NOT NULL,"
    assert lines[3].strip() == "year INTEGER"


@pytest.mark.unit
def test_create_table_without_if_not_exists():
    """IF NOT EXISTS can be switched off."""
    assert create_table('t', {'a': 'TEXT'}, if_not_exists=False).startswith("CREATE TABLE t (")


@pytest.mark.unit
def test_create_table_like():
    """Backups copy structure including defaults, constraints and indexes."""
    assert create_table_like('book_backup', 'book') == \
        "CREATE TABLE book_backup (LIKE book INCLUDING ALL)"


@pytest.mark.unit
def test_drop_table():
    """Drops are idempotent by default."""
    assert drop_table('book') == "DROP TABLE IF EXISTS book"
    assert drop_table('book', if_exists=False, cascade=True) == "DROP TABLE book CASCADE"


@pytest.mark.unit
def test_backup_table_name():
    """Backup tables get a _backup suffix."""
    assert backup_table_name('nightly') == 'nightly_backup'


@pytest.mark.edge_case
@pytest.mark.parametrize("column", ['id', 'ID'])
def test_create_table_rejects_id_column(column):
    """The id column is reserved for the generated primary key."""
    with pytest.raises(ValueError, match="created automatically"):
        create_table('t', {column: 'INTEGER'})


@pytest.mark.edge_case
def test_create_table_rejects_empty_definition():
    """Every column needs a type."""
    with pytest.raises(ValueError):
        create_table('t', {'name': '  '})


@pytest.mark.edge_case
def test_drop_table_rejects_bad_name():
    """Table names are validated."""
    with pytest.raises(ValueError):
        drop_table('book; DROP TABLE author')
