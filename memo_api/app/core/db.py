"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a transactional cursor (``get_cursor``) and for
applying migrations on application start (``init_db``).  SQLite plays
the role of the document store: accounts, memos, stars and sessions
each live in their own table.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings
from .errors import StorageError


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS accounts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            salt TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- AUTOINCREMENT guarantees ids are never reused, so the id
        -- doubles as the feed cursor.
        CREATE TABLE IF NOT EXISTS memos (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            writer TEXT NOT NULL,
            contents TEXT NOT NULL CHECK (contents <> ''),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            edited_at TIMESTAMP,
            is_edited INTEGER NOT NULL DEFAULT 0
        );

        CREATE INDEX IF NOT EXISTS idx_memos_writer ON memos(writer, id);

        CREATE TABLE IF NOT EXISTS memo_stars (
            memo_id INTEGER NOT NULL,
            username TEXT NOT NULL,
            PRIMARY KEY (memo_id, username),
            FOREIGN KEY(memo_id) REFERENCES memos(id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: server-side sessions
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS sessions (
            token TEXT PRIMARY KEY,
            account_id INTEGER NOT NULL,
            username TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            expires_at REAL NOT NULL,
            FOREIGN KEY(account_id) REFERENCES accounts(id) ON DELETE CASCADE
        );
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # memo_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be read by name.
    Foreign key enforcement is switched on for every connection since
    SQLite leaves it off by default; memo deletion relies on it to
    cascade to ``memo_stars``.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor(immediate: bool = False) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor inside one transaction.

    With ``immediate`` the transaction takes the write lock before the
    first statement, so rows read in the block cannot be changed by
    another writer until it ends.

    Commits when the block exits normally and rolls back otherwise.  Any
    ``sqlite3.Error`` is re-raised as ``StorageError`` so the API layer
    can answer with a uniform failure response; service errors raised
    inside the block pass through unchanged.
    """
    try:
        conn = get_connection()
    except sqlite3.Error as exc:
        raise StorageError() from exc
    try:
        cursor = conn.cursor()
        if immediate:
            cursor.execute("BEGIN IMMEDIATE")
        yield cursor
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        raise StorageError() from exc
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies any newer entries of
    ``MIGRATIONS``.  Append new migrations with an incremented version
    number; never edit an applied one.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
