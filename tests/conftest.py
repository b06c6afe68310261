"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator

import pytest

from row_projection.core.path import RelationalPath


@pytest.fixture
def order_path() -> RelationalPath:
    """Order table exposing the id column plus embedded address columns."""
    return RelationalPath.of("orders", "id", "street", "city")


@pytest.fixture
def memory_db() -> Iterator[sqlite3.Connection]:
    """SQLite in-memory connection returning sqlite3.Row rows."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
