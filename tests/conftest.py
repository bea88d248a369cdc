"""
Shared pytest configuration and fixtures for all tests.

Key fixtures:
- sqlite_engine: in-memory SQLite engine for statements that are portable SQL
- sqlite_accessor: TableAccessor bound to sqlite_engine with sample tables
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'accessor', 'core', 'sql', etc. without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from sqlalchemy import create_engine, text  # noqa: E402

SAMPLE_SCHEMA = [
    "CREATE TABLE author (id INTEGER PRIMARY KEY, name TEXT)",
    "CREATE TABLE book (id INTEGER PRIMARY KEY, title TEXT, year INTEGER, author_id INTEGER)",
    "CREATE TABLE book_author (book_id INTEGER, author_id INTEGER)",
    "CREATE TABLE book_import (id INTEGER, isbn TEXT, title TEXT)",
    "CREATE TABLE book_catalog (id INTEGER PRIMARY KEY, isbn TEXT, title TEXT)",
]

SAMPLE_ROWS = [
    "INSERT INTO author (id, name) VALUES (1, 'Frank Herbert'), (2, 'Jane Austen')",
    "INSERT INTO book (id, title, year, author_id) VALUES "
    "(1, 'Dune', 1965, 1), (2, 'Emma', 1815, 2), (3, 'Persuasion', 1817, NULL)",
    "INSERT INTO book_author (book_id, author_id) VALUES (1, 1), (2, 2), (2, 1)",
]


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")
    config.addinivalue_line("markers", "regression: Regression tests - previously fixed bugs")


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine, disposed after the test."""
    engine = create_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def sqlite_accessor(sqlite_engine):
    """TableAccessor over SQLite, preloaded with author/book/book_author rows."""
    from accessor.table_accessor import TableAccessor

    accessor = TableAccessor(sqlite_engine)
    conn = accessor.get_connection()
    for statement in SAMPLE_SCHEMA + SAMPLE_ROWS:
        conn.execute(text(statement))
    conn.commit()

    yield accessor

    accessor.close()
