"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), running a block of statements as one atomic
unit of work (``unit_of_work``) and applying migrations on
application start (``init_db``).

Connections are opened in autocommit mode so that transactions are
demarcated explicitly.  Write units of work start with ``BEGIN
IMMEDIATE``: SQLite then grants the reserved lock up front and a
second writer blocks (up to ``settings.database_timeout``) instead of
interleaving its reads and writes with ours.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

from .config import settings

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[], sqlite3.Connection]


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS books (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            category TEXT NOT NULL DEFAULT 'UNSPECIFIED'
        );

        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            age INTEGER CHECK (age IS NULL OR age >= 0)
        );

        CREATE TABLE IF NOT EXISTS loan_records (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            book_name TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'ON_LOAN',
            FOREIGN KEY(user_id) REFERENCES users(id)
        );
        """,
    ),
    # Migration 2: lookup indices
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_books_name ON books(name);
        CREATE INDEX IF NOT EXISTS idx_users_name ON users(name);
        CREATE INDEX IF NOT EXISTS idx_loan_records_user_id ON loan_records(user_id);
        """,
    ),
    # Migration 3: at most one active loan per book name
    (
        3,
        """
        -- Partial unique index: only rows still on loan take part, so
        -- any number of RETURNED records may share a book name.
        CREATE UNIQUE INDEX IF NOT EXISTS ux_loan_records_on_loan_book
            ON loan_records(book_name) WHERE status = 'ON_LOAN';
        """,
    ),
]


def get_database_path(db_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If ``db_url`` (or ``settings.database_url``) is an absolute path,
    use it directly.  A relative path is resolved against the current
    working directory of the process, never against the installed
    package.
    """
    db_url = db_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    return str((Path.cwd() / db_url).resolve())


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection returns rows keyed by column name, runs in
    autocommit mode (``isolation_level=None``) and has foreign key
    enforcement turned on.  SQLite disables foreign keys by default
    and the setting is per connection.
    """
    path = get_database_path(db_path)
    conn = sqlite3.connect(
        path,
        timeout=settings.database_timeout,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def connection_factory(db_path: Optional[str] = None) -> ConnectionFactory:
    """Return a zero-argument callable opening connections to ``db_path``."""

    def connect() -> sqlite3.Connection:
        return get_connection(db_path)

    return connect


@contextmanager
def unit_of_work(
    connect: Optional[ConnectionFactory] = None,
    readonly: bool = False,
) -> Iterator[sqlite3.Connection]:
    """Run the enclosed block as a single transaction.

    Commits when the block finishes and rolls back when it raises;
    the exception is re-raised unchanged.  The connection is always
    closed on exit.
    """
    conn = (connect or get_connection)()
    try:
        conn.execute("BEGIN" if readonly else "BEGIN IMMEDIATE")
        yield conn
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(connect: Optional[ConnectionFactory] = None) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a new migration, append it with an
    incremented version number.
    """
    conn = (connect or get_connection)()
    try:
        cursor = conn.cursor()
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
    finally:
        conn.close()
