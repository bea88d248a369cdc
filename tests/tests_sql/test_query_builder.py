"""
==================================================
Pytest suite for sql/query_builder.py
==================================================

Sections:
---------
1. Unit tests - each builder's SQL text and parameters
2. Edge case tests - empty inputs and invalid identifiers

How to Execute:
---------------
All tests:          pytest tests/tests_sql/test_query_builder.py -v
By category:        pytest tests/tests_sql/test_query_builder.py -m unit
"""

import pytest

from sql.query_builder import (
    get_column_info_sql,
    join_builder,
    pivot_select_builder,
    select_builder,
    select_by_builder,
    select_within_ids_builder,
)

# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
def test_select_builder_defaults_to_all_columns():
    """No columns, where, limit or joins gives a bare SELECT *."""
    assert select_builder('book') == "SELECT *\nFROM book"


@pytest.mark.unit
def test_select_builder_full():
    """Columns, joins, raw where and limit appear in that order."""
    sql = select_builder(
        'book',
        columns=['book.title', 'author.name'],
        where="book.year > 1900",
        limit=5,
        left_joins={'author': 'author.id = book.author_id'}
    )

    assert sql == (
        "SELECT book.title, author.name\n"
        "FROM book\n"
        "LEFT JOIN author ON author.id = book.author_id\n"
        "WHERE book.year > 1900\n"
        "LIMIT 5"
    )


@pytest.mark.unit
def test_select_builder_keeps_join_order():
    """Each join is added once, in mapping order."""
    sql = select_builder('book', left_joins={
        'author': 'author.id = book.author_id',
        'publisher': 'publisher.id = book.publisher_id',
    })

    assert sql.index('LEFT JOIN author') < sql.index('LEFT JOIN publisher')
    assert sql.count('LEFT JOIN') == 2


@pytest.mark.unit
def test_select_builder_where_is_raw():
    """The where fragment is emitted exactly as given."""
    sql = select_builder('book', where="title = 'Dune' OR 1 = 1")
    assert sql.endswith("WHERE title = 'Dune' OR 1 = 1")


@pytest.mark.unit
def test_join_builder_types():
    """Join type defaults to LEFT and is upper-cased."""
    assert join_builder('author', 'author.id = book.author_id') == \
        "LEFT JOIN author ON author.id = book.author_id"
    assert join_builder('author', 'a = b', join_type='inner') == "INNER JOIN author ON a = b"


@pytest.mark.unit
def test_select_within_ids_builder():
    """Ids are written literally into an IN list."""
    sql = select_within_ids_builder('book', ['id', 'title'], [3, 1, 2])
    assert sql == "SELECT id, title\nFROM book\nWHERE id IN (3, 1, 2)"


@pytest.mark.unit
def test_select_within_ids_builder_coerces_numeric_strings():
    """Numeric strings and integral floats are accepted as ids."""
    sql = select_within_ids_builder('book', ids=['4', 5.0])
    assert sql.endswith("WHERE id IN (4, 5)")


@pytest.mark.unit
def test_pivot_select_builder():
    """Target joins pivot on its id; the pivot value is bound."""
    sql, params = pivot_select_builder('book_author', 'book', 'book_id', 7, ['book.title'])

    assert sql == (
        "SELECT book.title\n"
        "FROM book\n"
        "JOIN book_author ON book.id = book_author.book_id\n"
        "WHERE book_author.book_id = :pivot_value"
    )
    assert params == {'pivot_value': 7}


@pytest.mark.unit
def test_select_by_builder():
    """The lookup value is bound and a single row is requested."""
    sql, params = select_by_builder('user_account', 'email', 'a@b.c')

    assert sql == "SELECT *\nFROM user_account\nWHERE email = :value\nLIMIT 1"
    assert params == {'value': 'a@b.c'}


@pytest.mark.unit
def test_get_column_info_sql_bare_table():
    """A bare table name is looked up in the current schema."""
    sql, params = get_column_info_sql('book')

    assert "information_schema.columns" in sql
    assert "ORDER BY ordinal_position" in sql
    assert params == {'table_name': 'book', 'table_schema': None}


@pytest.mark.unit
def test_get_column_info_sql_qualified_table():
    """A schema-qualified name binds the schema."""
    _, params = get_column_info_sql('archive.book')
    assert params == {'table_name': 'book', 'table_schema': 'archive'}


@pytest.mark.unit
def test_get_column_info_sql_folds_mixed_case():
    """Unquoted names are matched in lower case, as PostgreSQL stores them."""
    _, params = get_column_info_sql('Archive.Book')
    assert params == {'table_name': 'book', 'table_schema': 'archive'}

    _, params = get_column_info_sql('Book')
    assert params == {'table_name': 'book', 'table_schema': None}


# ====================
# 2. EDGE CASE TESTS
# ====================

@pytest.mark.edge_case
def test_select_builder_ignores_non_positive_limit():
    """A limit of zero or below adds no LIMIT clause."""
    assert "LIMIT" not in select_builder('book', limit=0)
    assert "LIMIT" not in select_builder('book', limit=-3)


@pytest.mark.edge_case
def test_select_within_ids_builder_empty_ids_has_no_filter():
    """An empty id list selects every row."""
    assert select_within_ids_builder('book', [], []) == "SELECT *\nFROM book"
    assert "WHERE" not in select_within_ids_builder('book')


@pytest.mark.edge_case
@pytest.mark.parametrize("bad_id", ["1) OR (1=1", "abc", 2.5, None, True])
def test_select_within_ids_builder_rejects_non_integers(bad_id):
    """Anything that is not an integer id is rejected before interpolation."""
    with pytest.raises(ValueError):
        select_within_ids_builder('book', ids=[1, bad_id])


@pytest.mark.edge_case
def test_select_builder_rejects_bad_table():
    """Table names are validated before being written into SQL."""
    with pytest.raises(ValueError):
        select_builder('book; DROP TABLE book')


@pytest.mark.edge_case
def test_join_builder_rejects_unknown_type_and_missing_condition():
    """Only standard join types with a condition are built."""
    with pytest.raises(ValueError):
        join_builder('author', 'a = b', join_type='SIDEWAYS')
    with pytest.raises(ValueError):
        join_builder('author', '')


@pytest.mark.edge_case
@pytest.mark.parametrize("pivot_column", ["*", "book_author.*", "book_author.book_id"])
def test_pivot_select_builder_rejects_star_and_qualified_column(pivot_column):
    """The pivot column must be a bare column of the pivot table."""
    with pytest.raises(ValueError):
        pivot_select_builder('book_author', 'book', pivot_column, 7)
