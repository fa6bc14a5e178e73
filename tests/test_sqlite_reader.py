"""Test table listing and row materialization from SQLite."""

import asyncio
import sqlite3

import pytest

from sqlite2mongo.core.errors import DatabaseConnectionError, QueryError
from sqlite2mongo.core.sqlite_reader import fetch_table, list_tables, open_source, quote_identifier
from sqlite2mongo.models.config import SQLiteConfig


def run_with_source(db_path, operation):
    """Open the database, run an async operation on it and close it."""
    
    async def runner():
        conn = await open_source(SQLiteConfig(path=str(db_path)))
        try:
            return await operation(conn)
        finally:
            await conn.close()
    
    return asyncio.run(runner())


def test_list_tables_skips_internal_tables(sqlite_db):
    """Test sqlite_sequence and friends are not migrated."""
    
    tables = run_with_source(sqlite_db, list_tables)
    
    assert tables == ["users", "events"]


def test_list_tables_empty_database(tmp_path):
    """Test a database without tables yields nothing."""
    
    db_path = tmp_path / "empty.sqlite"
    sqlite3.connect(db_path).close()
    
    assert run_with_source(db_path, list_tables) == []


def test_fetch_table_returns_columns_and_rows(sqlite_db):
    """Test a full scan with declared column types."""
    
    data = run_with_source(sqlite_db, lambda conn: fetch_table(conn, "users"))
    
    assert data.table == "users"
    assert [(c.name, c.declared_type) for c in data.columns] == [
        ("id", "INTEGER"),
        ("name", "TEXT"),
        ("active", "BOOLEAN"),
    ]
    assert data.rows == [(1, "Alice", 1), (2, "Bob", "f")]
    assert len(data) == 2


def test_fetch_table_keeps_storage_classes(sqlite_db):
    """Test raw cells keep the Python type of their storage class."""
    
    data = run_with_source(sqlite_db, lambda conn: fetch_table(conn, "events"))
    
    assert [c.declared_type for c in data.columns] == ["INTEGER", "DATETIME", "BLOB", "REAL", ""]
    assert data.rows == [(10, "2024-03-01 12:30:00", b"\x00\xff", 1.5, 7)]


def test_fetch_table_rows_pair_with_columns(sqlite_db):
    """Test rows are exposed as (column, cell) pairs."""
    
    data = run_with_source(sqlite_db, lambda conn: fetch_table(conn, "users"))
    
    first = next(data.iter_rows())
    
    assert [(column.name, value) for column, value in first] == [("id", 1), ("name", "Alice"), ("active", 1)]


def test_fetch_table_with_quoted_name(tmp_path):
    """Test table names needing quotes are scanned correctly."""
    
    db_path = tmp_path / "quoted.sqlite"
    conn = sqlite3.connect(db_path)
    conn.execute('CREATE TABLE "order ""items""" (sku TEXT)')
    conn.execute('INSERT INTO "order ""items""" VALUES (\'A-1\')')
    conn.commit()
    conn.close()
    
    data = run_with_source(db_path, lambda conn: fetch_table(conn, 'order "items"'))
    
    assert data.rows == [("A-1",)]
    assert data.columns[0].declared_type == "TEXT"


def test_fetch_missing_table_raises_query_error(sqlite_db):
    """Test scanning an unknown table fails with the table name attached."""
    
    with pytest.raises(QueryError) as exc_info:
        run_with_source(sqlite_db, lambda conn: fetch_table(conn, "missing"))
    
    assert exc_info.value.table == "missing"


def test_open_missing_file_raises_connection_error(tmp_path):
    """Test a missing source file is not silently created."""
    
    missing = tmp_path / "missing.sqlite"
    
    with pytest.raises(DatabaseConnectionError):
        asyncio.run(open_source(SQLiteConfig(path=str(missing))))
    
    assert not missing.exists()


def test_quote_identifier():
    """Test identifier quoting doubles embedded quotes."""
    
    assert quote_identifier("users") == '"users"'
    assert quote_identifier('a"b') == '"a""b"'
