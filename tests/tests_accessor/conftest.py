"""
Fake SQLAlchemy connection objects for TableAccessor tests.

Key fixtures:
- fake_connection: records executed SQL and hands out queued results
- fake_accessor: TableAccessor adopting fake_connection
"""

import pytest


class FakeResult:
    """Mock SQLAlchemy result supporting .mappings().all() / .first()."""
    def __init__(self, rows=None):
        self.rows = rows or []

    def mappings(self):
        return self

    def all(self):
        return list(self.rows)

    def first(self):
        return self.rows[0] if self.rows else None


class FakeConnection:
    """Mock SQLAlchemy connection recording statements and transactions."""
    def __init__(self):
        self.results = []
        self.executed = []
        self.error = None
        self.rollback_error = None
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def queue(self, *row_lists):
        """Queue one result per future execute() call."""
        self.results.extend(FakeResult(rows) for rows in row_lists)

    def execute(self, statement, params=None):
        self.executed.append((str(statement), params))
        if self.error is not None:
            raise self.error
        return self.results.pop(0) if self.results else FakeResult()

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1
        if self.rollback_error is not None:
            raise self.rollback_error

    def close(self):
        self.closed = True

    @property
    def statements(self):
        return [sql for sql, _ in self.executed]


@pytest.fixture
def fake_connection():
    """Provide a fresh fake connection."""
    return FakeConnection()


@pytest.fixture
def fake_accessor(fake_connection):
    """TableAccessor wired to the fake connection."""
    from accessor.table_accessor import TableAccessor

    return TableAccessor(fake_connection)
