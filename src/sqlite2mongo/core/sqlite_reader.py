"""Reading tables and rows from the SQLite source."""

import sqlite3
from typing import Dict, List

import aiosqlite

from ..models.config import SQLiteConfig
from ..models.migration import Column, TableData
from .errors import DatabaseConnectionError, QueryError

LIST_TABLES_SQL = "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"


def quote_identifier(name: str) -> str:
    """Quote a table name for use in SQL, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


async def open_source(config: SQLiteConfig) -> aiosqlite.Connection:
    """Open the SQLite file read-only."""
    try:
        return await aiosqlite.connect(config.connection_uri(), uri=True)
    except sqlite3.Error as e:
        raise DatabaseConnectionError(f"Cannot open SQLite database {config.path}: {e}") from e


async def list_tables(conn: aiosqlite.Connection) -> List[str]:
    """Return user table names in catalog order, skipping SQLite's own tables."""
    try:
        async with conn.execute(LIST_TABLES_SQL) as cursor:
            rows = await cursor.fetchall()
    except sqlite3.Error as e:
        raise QueryError(f"Cannot list tables: {e}") from e

    return [row[0] for row in rows]


async def get_declared_types(conn: aiosqlite.Connection, table: str) -> Dict[str, str]:
    """Return column name -> declared type text for a table."""
    async with conn.execute(f"PRAGMA table_info({quote_identifier(table)})") as cursor:
        rows = await cursor.fetchall()

    # (cid, name, type, notnull, dflt_value, pk)
    return {row[1]: row[2] or "" for row in rows}


async def fetch_table(conn: aiosqlite.Connection, table: str) -> TableData:
    """Load every row of a table into memory along with its column types."""
    try:
        declared_types = await get_declared_types(conn, table)
        async with conn.execute(f"SELECT * FROM {quote_identifier(table)}") as cursor:
            rows = await cursor.fetchall()
            columns = [
                Column(name=description[0], declared_type=declared_types.get(description[0], ""))
                for description in cursor.description
            ]
    except sqlite3.Error as e:
        raise QueryError(f"Cannot read table {table}: {e}", table=table) from e

    return TableData(table=table, columns=columns, rows=[tuple(row) for row in rows])
