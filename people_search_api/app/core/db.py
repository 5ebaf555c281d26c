"""
SQLite database integration.

This module provides functions for obtaining a database connection
(``get_connection``, ``get_cursor``) and for creating the schema on
application start (``init_db``).  It uses SQLite as a lightweight
embedded database; to switch to another DBMS you would replace the
connection logic and adapt the SQL accordingly.

Person and image rows reference each other only by id (``avatar_id``
and ``person_id``).  Those are weak references, so no foreign keys are
declared between the two tables.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings


SCHEMA = """
CREATE TABLE IF NOT EXISTS people (
    id TEXT PRIMARY KEY,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    gender TEXT,
    age INTEGER,
    interests TEXT,
    avatar_id TEXT,
    addr1 TEXT,
    addr2 TEXT,
    country TEXT,
    state TEXT,
    city TEXT,
    zip_code TEXT
);

CREATE TABLE IF NOT EXISTS images (
    id TEXT PRIMARY KEY,
    person_id TEXT,
    data BLOB NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_images_person_id ON images(person_id);
"""


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` objects so columns can be
    accessed by name.  Concurrent writers wait up to ``timeout``
    seconds for the database lock instead of failing immediately.
    """
    conn = sqlite3.connect(get_database_path(), timeout=10.0)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db() -> None:
    """Create the ``people`` and ``images`` tables if they do not exist."""
    with get_cursor() as cursor:
        cursor.executescript(SCHEMA)
