"""
Database connection helpers for both storage engines.

Two engines are supported and selected by a single connection target:

* a MongoDB deployment (``mongodb://`` or ``mongodb+srv://`` URL), reached
  through ``pymongo``;
* an embedded SQLite file, used for local development and tests.

The SQLite helpers keep the small migration mechanism used across the
project: applied versions are stored in the ``migrations`` table and new
entries of ``MIGRATIONS`` are executed in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

from pymongo import MongoClient
from pymongo.collection import Collection

MONGO_SCHEMES = ("mongodb://", "mongodb+srv://")
SQLITE_PREFIX = "sqlite:///"

STUDENTS_COLLECTION = "students"

MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS students (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            name TEXT,
            email TEXT,
            roll_no TEXT
        );
        """,
    ),
]


def is_mongo_url(database_url: str) -> bool:
    """Return True if ``database_url`` points at a MongoDB deployment."""
    return database_url.startswith(MONGO_SCHEMES)


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Accepts either a plain path or a ``sqlite:///`` URL.  Relative paths
    are resolved against the current working directory.  In-memory
    databases raise ``ValueError`` because every call opens its own
    connection.
    """
    if database_url.startswith(SQLITE_PREFIX):
        database_url = database_url[len(SQLITE_PREFIX):]
    if database_url == ":memory:" or database_url.startswith("file::memory:"):
        raise ValueError("in-memory SQLite databases are not supported; use a file path")
    if os.path.isabs(database_url):
        return database_url
    return str(Path(database_url).resolve())


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection with name-addressable rows."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor, commits and closes the connection."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: str) -> None:
    """Create the ``migrations`` table and apply pending migrations."""
    with get_cursor(db_path) as cursor:
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


def create_mongo_client(database_url: str, timeout_ms: int = 5000) -> MongoClient:
    """Create a lazily-connecting client for ``database_url``."""
    return MongoClient(database_url, serverSelectionTimeoutMS=timeout_ms)


def get_students_collection(client: MongoClient, default_db_name: str) -> Collection:
    """Return the students collection.

    The database named in the connection URL wins over ``default_db_name``.
    """
    return client.get_default_database(default=default_db_name)[STUDENTS_COLLECTION]
