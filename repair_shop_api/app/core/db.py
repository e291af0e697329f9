"""
SQLite database integration and simple migration system.

The ``Database`` class is the single handle to the store.  It is built
once by ``create_app``, initialised on application startup (``init_db``
applies pending migrations) and closed on shutdown.  Repository services
receive it through their constructor and acquire a connection per
operation with ``Database.connection``, which commits on success, rolls
back on error and always closes the connection.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .errors import StoreError

logger = logging.getLogger(__name__)

# Largest value an SQLite INTEGER column (and therefore a row id) can hold.
MAX_ROW_ID = 2**63 - 1


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS services (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            serial_number TEXT NOT NULL UNIQUE,
            customer_name TEXT NOT NULL,
            phone_number VARCHAR(20) NOT NULL,
            device_model TEXT NOT NULL,
            fault_description TEXT NOT NULL,
            service_date TEXT NOT NULL,
            estimated_cost TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'in_progress'
                CHECK (status IN ('in_progress', 'completed', 'returned')),
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            completed_at TIMESTAMP,
            returned_at TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS inventory (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            model TEXT NOT NULL,
            product TEXT NOT NULL,
            condition TEXT NOT NULL
                CHECK (condition IN ('new', 'used', 'refurbished')),
            quantity INTEGER NOT NULL DEFAULT 1 CHECK (quantity >= 1),
            count INTEGER NOT NULL DEFAULT 0 CHECK (count >= 0),
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
    # Migration 2: indices for the list filters
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_services_status ON services(status);
        CREATE INDEX IF NOT EXISTS idx_services_service_date ON services(service_date, status);
        """,
    ),
]


def utcnow() -> datetime:
    """Current time in UTC; stored timestamps are ISO strings of this value."""
    return datetime.now(timezone.utc)


def like_pattern(query: str) -> str:
    """Build a ``LIKE`` substring pattern, escaping wildcards with a backslash."""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def resolve_database_path(database_url: str) -> str:
    """Return an absolute path for ``database_url``.

    Absolute paths are returned unchanged; relative paths are resolved
    against the current working directory.
    """
    path = Path(database_url)
    if path.is_absolute():
        return str(path)
    return str(path.resolve())


class Database:
    """Handle to the SQLite store shared by all repository services."""

    def __init__(self, database_url: str) -> None:
        self.path = resolve_database_path(database_url)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get_connection(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        Rows are returned as ``sqlite3.Row`` so columns can be accessed by
        name.  No type detection is enabled; timestamps come back as the
        ISO strings they were stored as.
        """
        if self._closed:
            raise StoreError("Database is closed")
        conn = sqlite3.connect(self.path, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def connection(self, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """Yield a connection wrapped in a transaction.

        With ``immediate=True`` the write lock is taken up front
        (``BEGIN IMMEDIATE``) so that reads inside the block cannot be
        invalidated by a concurrent writer before the block commits.
        """
        conn = self.get_connection()
        try:
            if immediate:
                conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the database file if needed and apply pending migrations."""
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with self.connection() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
            row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    conn.executescript(sql)
                    conn.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    current_version = version
                    logger.info("Applied migration %s", version)
        logger.info("Database ready at %s (schema version %s)", self.path, current_version)

    def close(self) -> None:
        """Release the handle.  Further connection attempts raise ``StoreError``."""
        self._closed = True
        logger.info("Database handle %s closed", self.path)
