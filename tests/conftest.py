"""Shared test fixtures."""

import os
import sqlite3

import pytest

CONFIG_ENV_KEYS = [
    "SQLITE_PATH",
    "MONGODB_URI",
    "MONGO_DATABASE",
    "MONGO_SERVER_SELECTION_TIMEOUT_MS",
    "MIGRATION_DRY_RUN",
    "MIGRATION_LOWER_CAMEL",
    "MIGRATION_ON_UNRECOGNIZED",
    "MIGRATION_SHOW_PROGRESS",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate os.environ and the working directory from the host."""
    monkeypatch.setattr(os, "environ", os.environ.copy())
    for key in CONFIG_ENV_KEYS:
        os.environ.pop(key, None)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sqlite_db(tmp_path):
    """Create a small SQLite database with mixed column types."""
    db_path = tmp_path / "source.sqlite"
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, active BOOLEAN);
        INSERT INTO users (id, name, active) VALUES (1, 'Alice', 1);
        INSERT INTO users (id, name, active) VALUES (2, 'Bob', 'f');

        CREATE TABLE events (
            event_id INTEGER,
            happened_at DATETIME,
            payload BLOB,
            score REAL,
            note
        );
        INSERT INTO events VALUES (10, '2024-03-01 12:30:00', x'00ff', 1.5, 7);
    """)
    conn.commit()
    conn.close()
    return db_path
