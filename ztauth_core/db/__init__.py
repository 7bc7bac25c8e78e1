"""Database module for ZTAuth Core.

This module provides the Core API for database operations.
Core encapsulates connection management and provides access to the stores.

ARCHITECTURE:
- Core owns its connection (no Flask g.db dependency)
- Connection closes via close() (use contextlib.closing) or when Core is collected
- Each store gets an encapsulated operations class:

    core.users     -> UserOperations     (user records)
    core.options   -> OptionsOperations  (global_options singleton)

TRANSACTIONS:
    Writes are pending until the operation commits or rolls back:
    >>> with closing(get_core()) as core:
    ...     core.users.update(user_id, {"name": "Ann"})
    ...     core.commit()
"""

import sqlite3
from contextlib import closing
from pathlib import Path
from typing import TYPE_CHECKING

from ..config import settings
from ..schema import SCHEMA_PATH

if TYPE_CHECKING:
    from .options import OptionsOperations
    from .user import UserOperations


class Core:
    """
    Database Core with store operations.

    Maintains its own connection and transaction state.
    Provides access to store operations through properties.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        owned: bool = False
    ):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
            owned: If True, Core closes the connection when collected.
                   get_core() sets this; callers wrapping their own
                   connection (tests) leave it False.
        """
        self._conn = connection
        self._owned = owned
        self._user_ops = None
        self._options_ops = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Underlying SQLite connection."""
        return self._conn

    @property
    def users(self) -> "UserOperations":
        """User store operations.

        Lazy-loaded to avoid circular import issues.
        Operations are created on first access and cached.
        """
        if self._user_ops is None:
            from .user import UserOperations
            self._user_ops = UserOperations(self._conn)
        return self._user_ops

    @property
    def options(self) -> "OptionsOperations":
        """Global options store operations."""
        if self._options_ops is None:
            from .options import OptionsOperations
            self._options_ops = OptionsOperations(self._conn)
        return self._options_ops

    def commit(self) -> None:
        """Commit pending writes."""
        self._conn.commit()

    def rollback(self) -> None:
        """Discard pending writes."""
        self._conn.rollback()

    def close(self) -> None:
        """Close the connection. Used with contextlib.closing()."""
        self._conn.close()
        self._owned = False

    def __del__(self):
        """Close an owned connection if not already closed."""
        if getattr(self, "_owned", False) and self._conn:
            try:
                self._conn.close()
            except sqlite3.Error:
                # Connection may already be closed or invalid
                pass


def _create_connection() -> sqlite3.Connection:
    """Create a fresh database connection.

    Returns:
        SQLite connection with row_factory set to sqlite3.Row
        and foreign keys enabled.
    """
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_core() -> Core:
    """
    Get a database Core instance on a fresh connection.

    Callers commit explicitly via core.commit() and close the Core when done.

    Returns:
        Core instance with users/options operations
    """
    return Core(_create_connection(), owned=True)


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def apply_schema(conn: sqlite3.Connection) -> None:
    """Run schema.sql against an open connection."""
    conn.executescript(SCHEMA_PATH.read_text())
    conn.commit()


def init_db():
    """Initialize database by running schema.sql if not already initialized."""
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with closing(sqlite3.connect(str(db_path))) as db:
        # Check if database is already initialized
        cursor = db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
        )
        if cursor.fetchone():
            return

        apply_schema(db)


def get_schema_version(conn: sqlite3.Connection) -> str:
    """
    Get current schema version from _schema_metadata table.

    Returns:
        Schema version string (e.g., '20260101')
    """
    row = conn.execute(
        "SELECT value FROM _schema_metadata WHERE key = 'version'"
    ).fetchone()
    return row[0] if row else "unknown"
